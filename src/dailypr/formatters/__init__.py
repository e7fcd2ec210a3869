from .json_fmt import format_json, report_to_dict
from .slack_fmt import build_payload, chunk_lines, to_mrkdwn

__all__ = ["build_payload", "chunk_lines", "format_json", "report_to_dict", "to_mrkdwn"]
