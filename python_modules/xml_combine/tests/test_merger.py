import zipfile

import pytest
from lxml import etree

from xml_combine.merger import append_fragment, combine
from xml_combine.utils.exceptions import (
    InvalidRootNameError, NoSourceFilesError, RootTagNotFoundError, SplitError
)


def combined_files(base_dir):
    return list(base_dir.rglob("*combined*"))


def test_new_root_wraps_all_records_in_discovery_order(tmp_path, records):
    records(tmp_path / "CFNC XML 2.xml", [3, 4])
    records(tmp_path / "CFNC XML 1.xml", [1, 2])

    result = combine("CFNC XML*", tmp_path, "Collection")

    assert combined_files(tmp_path) == [result.new_file]
    assert result.fragments == 4
    assert [p.name for p in result.sources] == ["CFNC XML 1.xml", "CFNC XML 2.xml"]

    text = result.new_file.read_text(encoding="utf-8")
    assert text.startswith('<?xml version="1.0"?>\n<Collection>\n')
    assert text.endswith("</Collection>\n")
    assert text.count("<Collection>") == 1
    assert text.count("<?xml") == 1

    root = etree.parse(str(result.new_file)).getroot()
    assert root.tag == "Collection"
    assert [item.get("id") for item in root] == ["1", "2", "3", "4"]

    # Sources, fragments and headers are all consumed
    assert [p.name for p in tmp_path.iterdir()] == [result.new_file.name]


def test_flat_mode_concatenates_bytes(tmp_path):
    (tmp_path / "part2.csv").write_bytes(b"3,c\r\n4,d\r\n")
    (tmp_path / "part1.csv").write_bytes(b"1,a\n2,b\n")

    result = combine("part*", tmp_path)

    assert result.new_file.suffix == ".csv"
    assert result.new_file.read_bytes() == b"1,a\n2,b\n3,c\r\n4,d\r\n"
    assert result.fragments == 0
    assert [p.name for p in tmp_path.iterdir()] == [result.new_file.name]


def test_rerun_never_picks_up_previous_output(tmp_path):
    (tmp_path / "part1.csv").write_bytes(b"1\n")
    first = combine("part*", tmp_path)

    (tmp_path / "part2.csv").write_bytes(b"2\n")
    second = combine("part*", tmp_path)

    assert second.sources == [tmp_path / "part2.csv"]
    assert first.new_file.read_bytes() == b"1\n"


def test_zip_archives_are_staged_and_cleaned(tmp_path, records):
    staging = tmp_path / "staging"
    staging.mkdir()
    records(staging / "data 1.xml", [1, 2])
    records(staging / "data 2.xml", [3])
    with zipfile.ZipFile(tmp_path / "data batch.zip", "w") as archive:
        archive.write(staging / "data 1.xml", "data 1.xml")
        archive.write(staging / "data 2.xml", "data 2.xml")
    for path in staging.iterdir():
        path.unlink()
    staging.rmdir()

    result = combine("data*", tmp_path, "Batch")

    assert not (tmp_path / "data batch.zip").exists()
    assert not (tmp_path / "data batch").exists()
    root = etree.parse(str(result.new_file)).getroot()
    assert root.tag == "Batch"
    assert [item.get("id") for item in root] == ["1", "2", "3"]


def test_malformed_source_aborts_and_stays(tmp_path, records):
    records(tmp_path / "data 1.xml", [1])
    bad = tmp_path / "data 2.xml"
    bad.write_text('<?xml version="1.0"?>\n<Items>\n<Item id="2">', encoding="utf-8")

    with pytest.raises(SplitError):
        combine("data*", tmp_path, "Collection")

    assert bad.exists()
    assert not (tmp_path / "data 1.xml").exists()


def test_no_sources(tmp_path):
    with pytest.raises(NoSourceFilesError):
        combine("data*", tmp_path)


def test_invalid_root_name_touches_nothing(tmp_path, records):
    source = records(tmp_path / "data 1.xml", [1])

    with pytest.raises(InvalidRootNameError):
        combine("data*", tmp_path, "<Bad Root>")

    assert source.exists()
    assert combined_files(tmp_path) == []


def test_undetectable_root_fails_fast(tmp_path):
    source = tmp_path / "data 1.xml"
    source.write_text('<?xml version="1.0"?>\n<Items\n  a="1">\n<Item/>\n</Items>\n', encoding="utf-8")

    with pytest.raises(RootTagNotFoundError):
        combine("data*", tmp_path, "Collection")

    assert source.exists()


def test_append_fragment_strips_declarations(tmp_path):
    fragment = tmp_path / "data 1-01.xml"
    fragment.write_text("<?xml version='1.0' encoding='UTF-8'?>\n<Item>\n  <Name/>\n</Item>", encoding="utf-8")
    new_file = tmp_path / "out.xml"
    new_file.write_text("<Collection>\n", encoding="utf-8")

    append_fragment(fragment, new_file)

    assert new_file.read_text(encoding="utf-8") == "<Collection>\n<Item>\n  <Name/>\n</Item>"


def test_every_record_is_kept_past_four_digit_fragments(tmp_path, records):
    records(tmp_path / "data 1.xml", range(1, 10002))

    result = combine("data*", tmp_path, "Collection")

    root = etree.parse(str(result.new_file)).getroot()
    assert len(root) == 10001
    assert root[-1].get("id") == "10001"
    assert result.fragments == 10001
    assert [p.name for p in tmp_path.iterdir()] == [result.new_file.name]


def test_latin1_sources_are_combined_in_their_encoding(tmp_path):
    (tmp_path / "data 1.xml").write_bytes(
        b'<?xml version="1.0" encoding="ISO-8859-1"?>\n<Items>\n  <Item>Jos\xe9</Item>\n</Items>\n'
    )
    (tmp_path / "data 2.xml").write_bytes(
        '<?xml version="1.0" encoding="UTF-8"?>\n<Items>\n  <Item>Renée €</Item>\n</Items>\n'.encode("utf-8")
    )

    result = combine("data*", tmp_path, "Collection")

    data = result.new_file.read_bytes()
    assert data.startswith(b'<?xml version="1.0" encoding="ISO-8859-1"?>\n<Collection>\n')
    assert b"<Item>Jos\xe9</Item>" in data
    root = etree.parse(str(result.new_file)).getroot()
    assert [item.text for item in root] == ["José", "Renée €"]
