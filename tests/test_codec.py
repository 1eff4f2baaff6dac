import pytest

from patron_reconciler.codec import decode_csv_bytes, parse_table, serialize_table
from patron_reconciler.errors import InputMalformedError


def test_decode_strips_bom_and_normalizes_newlines():
    raw = b"\xef\xbb\xbfPatron ID,Email\r\n1,a@x.com\r\n"
    assert decode_csv_bytes(raw) == "Patron ID,Email\n1,a@x.com\n"


def test_decode_latin1():
    raw = "Patron ID,First Name\n1,André Montréal\n".encode("latin-1")
    assert "Montréal" in decode_csv_bytes(raw)


def test_parse_table_keys_rows_by_header():
    rows = parse_table(b"Patron ID , Email\n1,a@x.com\n2,b@x.com\n", "emails", ["Patron ID"])
    assert rows == [
        {"Patron ID": "1", "Email": "a@x.com"},
        {"Patron ID": "2", "Email": "b@x.com"},
    ]


def test_parse_table_pads_short_rows_and_truncates_long_ones():
    rows = parse_table(b"Patron ID,Email,Extra\n1\n2,b@x.com,x,y\n", "emails")
    assert rows[0] == {"Patron ID": "1", "Email": "", "Extra": ""}
    assert rows[1] == {"Patron ID": "2", "Email": "b@x.com", "Extra": "x"}


def test_parse_table_handles_quoted_commas():
    rows = parse_table(b'Patron ID,Tags\n1,"Board, Volunteer"\n', "constituents")
    assert rows[0]["Tags"] == "Board, Volunteer"


def test_parse_empty_buffer_yields_no_rows():
    assert parse_table(b"", "donations", ["Patron ID"]) == []


def test_parse_missing_required_column():
    with pytest.raises(InputMalformedError):
        parse_table(b"Id,Email\n1,a@x.com\n", "emails", ["Patron ID"])


def test_serialize_uses_first_row_keys():
    text = serialize_table([{"CB Tag Name": "Scholar", "CB Tag Count": 2}, {"CB Tag Name": "Donor", "CB Tag Count": 1}])
    assert text == "CB Tag Name,CB Tag Count\nScholar,2\nDonor,1\n"


def test_serialize_quotes_embedded_commas():
    assert serialize_table([{"CB Tags": "Scholar,Donor"}]) == 'CB Tags\n"Scholar,Donor"\n'


def test_serialize_nothing():
    assert serialize_table([]) == ""


def test_decode_rejects_bytes_with_no_encoding(monkeypatch):
    class NoMatch:
        def best(self):
            return None

    monkeypatch.setattr("patron_reconciler.codec.from_bytes", lambda raw: NoMatch())
    with pytest.raises(InputMalformedError):
        decode_csv_bytes(b"\xff\xfe\x00\x9c", "constituents")


def test_parse_table_wraps_csv_errors():
    raw = b"Patron ID,Email\n1," + b"x" * 200_000 + b"\n"
    with pytest.raises(InputMalformedError):
        parse_table(raw, "emails", ["Patron ID"])
