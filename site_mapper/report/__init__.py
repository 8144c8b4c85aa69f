"""site_mapper.report: сохранение результатов обхода."""

from site_mapper.report.json_report import render_json, result_to_dict

__all__ = ["render_json", "result_to_dict"]
