"""Conversion of the generated Markdown report into Slack Block Kit messages."""
from __future__ import annotations

import re
from datetime import datetime
from typing import Any

# Slack rejects section texts over 3000 characters.
SECTION_CHAR_LIMIT = 2800
REPORT_TITLE = "📊 Daily PR Report"

_CODE_FENCE_RE = re.compile(r"```\w*\n(.*?)\n```", re.DOTALL)
_H1_RE = re.compile(r"^# (.*?)$", re.MULTILINE)
_H2_RE = re.compile(r"^## (.*?)$", re.MULTILINE)
_H3_RE = re.compile(r"^### (.*?)$", re.MULTILINE)
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_LINK_RE = re.compile(r"\[(.*?)\]\((.*?)\)")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def unwrap_code_block(text: str) -> str:
    if match := _CODE_FENCE_RE.fullmatch(text.strip()):
        return match.group(1)
    return text


def to_mrkdwn(text: str) -> str:
    """Rewrite Markdown into Slack's mrkdwn dialect."""
    text = unwrap_code_block(text)
    text = _H1_RE.sub(r"*\1*\n", text)
    text = _H2_RE.sub(r"\n*\1*", text)
    text = _H3_RE.sub(r"_\1_", text)
    text = _BOLD_RE.sub(r"*\1*", text)
    text = _LINK_RE.sub(r"<\2|\1>", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def chunk_lines(text: str, limit: int = SECTION_CHAR_LIMIT) -> list[str]:
    """Split ``text`` into chunks of at most ``limit`` characters.

    Chunks break between lines and every line keeps its trailing newline, so
    joining the chunks gives back the text followed by a newline. Only a line
    that alone exceeds ``limit`` is cut into pieces.
    """
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        line += "\n"
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        if len(current) + len(line) > limit:
            chunks.append(current)
            current = line
        else:
            current += line
    if current:
        chunks.append(current)
    return chunks


def build_payload(report: str, now: datetime) -> dict[str, Any]:
    """Build the webhook payload: header, context, divider, then one section per chunk."""
    date = now.strftime("%Y-%m-%d")
    blocks: list[dict[str, Any]] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": REPORT_TITLE, "emoji": True},
        },
        {
            "type": "context",
            "elements": [
                {"type": "mrkdwn", "text": f"Generated on {date} at {now.strftime('%H:%M:%S')}"},
            ],
        },
        {"type": "divider"},
    ]
    for chunk in chunk_lines(to_mrkdwn(report)):
        blocks.append({"type": "section", "text": {"type": "mrkdwn", "text": chunk}})

    return {"text": f"{REPORT_TITLE} - {date}", "blocks": blocks}
