"""Prompt template loading.

Each analysis has one YAML file holding the instruction text (`content`) and
the format used for each conversation line (`line_format`).
"""

import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, List
from ..config import get_settings
from ..schemas.messages import ChatMessage

PROMPT_NAMES = ("summary", "sentiment", "actionItems", "miscommunications")

DEFAULT_LINE_FORMAT = "{user}: {text}"


@dataclass(frozen=True)
class AnalysisPrompt:
    name: str
    content: str
    line_format: str = DEFAULT_LINE_FORMAT

    def format_line(self, message: ChatMessage) -> str:
        return self.line_format.format(
            user=message.user or "unknown",
            text=message.text or "",
            ts=message.ts or "",
            channel=message.channel or "",
        )

    def render(self, messages: Iterable[ChatMessage]) -> str:
        conversation = "\n".join(self.format_line(m) for m in messages)
        return f"{self.content.rstrip()}\n\n{conversation}\n"


def load_prompt(name: str, prompts_dir: Optional[Path] = None) -> AnalysisPrompt:
    base = Path(prompts_dir) if prompts_dir else get_settings().prompts_dir

    # Prioritize .yaml for structured prompts
    yaml_path = base / f"{name}.yaml"
    if yaml_path.exists():
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}
            return AnalysisPrompt(
                name=name,
                content=data.get("content", ""),
                line_format=data.get("line_format", DEFAULT_LINE_FORMAT),
            )

    # Fallback to .md (instruction text only)
    md_path = base / f"{name}.md"
    if md_path.exists():
        with open(md_path, "r") as f:
            return AnalysisPrompt(name=name, content=f.read())

    raise FileNotFoundError(f"Prompt {name} not found as .yaml or .md")


def load_all_prompts(prompts_dir: Optional[Path] = None) -> List[AnalysisPrompt]:
    return [load_prompt(name, prompts_dir) for name in PROMPT_NAMES]
