"""Helpers that render preset bundles for the tests."""

from xml.sax.saxutils import escape

from services.data_manager import DataManager


def build_preset_xml(settings: dict, fields: list[dict]) -> str:
    """Render a preset.xml document from plain dicts."""
    parts = ["<?xml version=\"1.0\" encoding=\"UTF-8\"?>", "<preset>", "  <settings>"]
    for key, value in settings.items():
        parts.append(f"    <{key}>{escape(str(value))}</{key}>")
    parts.append("  </settings>")
    for field in fields:
        parts.append("  <field>")
        for key, value in field.items():
            parts.append(f"    <{key}>{escape(str(value))}</{key}>")
        parts.append("  </field>")
    parts.append("</preset>")
    return "\n".join(parts)


def template_files(prefix: str = "") -> dict[str, str]:
    return {
        filename: f"<!-- {prefix}{name} -->"
        for name, filename in DataManager.TEMPLATES_LIST.items()
    }
