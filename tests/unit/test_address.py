from street_geocoder.lookup.address import split_records, split_street_and_number


def test_split_name_and_number_with_suffix():
    assert split_street_and_number("Hauptstraße 12b") == ("Hauptstraße", "12b")


def test_split_without_digits_keeps_whole_name():
    assert split_street_and_number("Ringweg") == ("Ringweg", "")


def test_split_removes_whitespace_inside_number():
    assert split_street_and_number("Am Markt 3 - 5 a") == ("Am Markt", "3-5a")


def test_split_at_first_digit_run_only():
    assert split_street_and_number("Straße des 17. Juni 100") == ("Straße des", "17.Juni100")


def test_split_records_adds_street_fields_in_place():
    records = [
        {"Strasse": "Karl-Marx-Allee 34", "PLZ": "10178"},
        {"Strasse": "Ringweg", "PLZ": "10115"},
    ]

    out = split_records(records, "Strasse")

    assert out is records
    assert records[0]["streetName"] == "Karl-Marx-Allee"
    assert records[0]["streetNumber"] == "34"
    assert records[1]["streetName"] == "Ringweg"
    assert records[1]["streetNumber"] == ""


def test_split_records_skips_rows_missing_the_column():
    records = [{"PLZ": "10115"}]
    split_records(records, "Strasse")
    assert "streetName" not in records[0]


def test_split_records_passthrough_for_separate_columns():
    records = [{"Strasse": "Ringweg 4"}]
    assert split_records(records, "Strasse", same_column=False) == [{"Strasse": "Ringweg 4"}]


def test_split_only_treats_ascii_digits_as_numbers():
    assert split_street_and_number("Straße ١٢") == ("Straße ١٢", "")
    assert split_street_and_number("Straße ١٢ 4") == ("Straße ١٢", "4")
