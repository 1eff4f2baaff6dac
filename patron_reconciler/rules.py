"""
Deterministic reconciliation rules.

Input column names, output column names and the fixed vocabularies
the normalizers check against all live here.
"""

# Input columns
PATRON_ID = "Patron ID"

CONSTITUENT_COLUMNS = {
    "patron_id": PATRON_ID,
    "first_name": "First Name",
    "last_name": "Last Name",
    "date_entered": "Date Entered",
    "primary_email": "Primary Email",
    "company": "Company",
    "salutation": "Salutation",
    "title": "Title",
    "tags": "Tags",
    # upstream stores marital status under "Gender"
    "marital_status": "Gender",
}

DONATION_COLUMNS = {
    "patron_id": PATRON_ID,
    "amount": "Donation Amount",
    "date": "Donation Date",
    "payment_method": "Payment Method",
    "campaign": "Campaign",
    "status": "Status",
}

EMAIL_COLUMNS = {
    "patron_id": PATRON_ID,
    "email": "Email",
}

# Output columns, in serialization order
PROFILE_COLUMNS = {
    "constituent_id": "CB Constituent ID",
    "constituent_type": "CB Constituent Type",
    "first_name": "CB First Name",
    "last_name": "CB Last Name",
    "company_name": "CB Company Name",
    "created_at": "CB Created At",
    "email_1": "CB Email 1 (Standardized)",
    "email_2": "CB Email 2 (Standardized)",
    "title": "CB Title",
    "tags": "CB Tags",
    "background_information": "CB Background Information",
    "lifetime_donation_amount": "CB Lifetime Donation Amount",
    "most_recent_donation_date": "CB Most Recent Donation Date",
    "most_recent_donation_amount": "CB Most Recent Donation Amount",
}

TAG_SUMMARY_COLUMNS = {
    "tag_name": "CB Tag Name",
    "tag_count": "CB Tag Count",
}

ALLOWED_TITLES = ("Mr.", "Mrs.", "Ms.", "Dr.")

PAID_STATUS = "Paid"

MAX_PROFILE_EMAILS = 2

CSV_DELIMITER = ","
CSV_LINE_TERMINATOR = "\n"
