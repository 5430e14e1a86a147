"""Export plugin registry."""

from __future__ import annotations

from canvasqti.exporters.base import BaseExporter
from canvasqti.exporters.json_exporter import JsonExporter
from canvasqti.exporters.moodle_xml_exporter import MoodleXmlExporter


def get_exporters() -> dict[str, BaseExporter]:
    """Return exporter map by format."""

    exporters = [
        MoodleXmlExporter(),
        JsonExporter(),
    ]
    return {exp.format_name: exp for exp in exporters}
