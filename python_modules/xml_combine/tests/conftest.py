from pathlib import Path

import pytest

from xml_combine import config


@pytest.fixture(autouse=True)
def lxml_splitter(monkeypatch):
    """Tests never depend on an installed xml_split binary"""
    monkeypatch.setattr(config, "SPLITTER", "lxml")


def write_records(path: Path, ids, root="Items", declaration='<?xml version="1.0"?>'):
    """Write a small pretty-printed XML file with one <Item> per id"""
    lines = [declaration] if declaration else []
    lines.append(f"<{root}>")
    lines.extend(f'  <Item id="{i}">value {i}</Item>' for i in ids)
    lines.append(f"</{root}>")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def records():
    return write_records
