import shutil
from pathlib import Path

import pytest

from schema_source_json.plugin import JsonSchemaSourcePlugin
from schema_source_xml.plugin import XmlSchemaSourcePlugin

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def json_plugin():
    return JsonSchemaSourcePlugin()


@pytest.fixture
def xml_plugin():
    return XmlSchemaSourcePlugin()


@pytest.fixture
def json_export_path():
    return str(FIXTURES_DIR / "schema_export.json")


@pytest.fixture
def xml_export_path():
    return str(FIXTURES_DIR / "schema_export.xml")


@pytest.fixture
def json_export_copy(tmp_path):
    """Writable copy of the JSON export, for tests that edit it between fetches."""
    target = tmp_path / "schema_export.json"
    shutil.copy(FIXTURES_DIR / "schema_export.json", target)
    return target


@pytest.fixture
def xml_export_copy(tmp_path):
    target = tmp_path / "schema_export.xml"
    shutil.copy(FIXTURES_DIR / "schema_export.xml", target)
    return target
