"""
Base models and exceptions for the character import system.
"""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, Field

from ..models import ItemRecord


class ImportError(Exception):
    """Raised when a character file cannot be read or recognized.

    Provides a user-facing message explaining what went wrong
    and, where possible, how to fix it.
    """


class ImportWarning(BaseModel):
    """A warning generated during import."""

    section: str = Field(description="Section that triggered the warning")
    message: str = Field(description="Human-readable warning message")
    suggestion: str = Field(default="", description="Actionable suggestion to resolve the warning")


class ImportReport(BaseModel):
    """Structured import report with status, produced items and warnings."""

    status: str = Field(description='Import status: "success", "success_with_warnings", or "failed"')
    character_name: str = Field(description="Name of the imported character")
    item_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Number of produced items per Foundry item type",
    )
    warnings: list[ImportWarning] = Field(
        default_factory=list,
        description="Non-fatal issues encountered during import",
    )
    failed_sections: list[str] = Field(
        default_factory=list,
        description="Sections that could not be imported at all",
    )

    def format(self) -> str:
        """Format the report as a readable text block.

        Returns:
            Multi-line formatted string suitable for an MCP tool response.
        """
        lines: list[str] = []

        lines.append(f"D&D Beyond Import Report - {self.character_name}")
        status_display = self.status.upper().replace("_", " ")
        lines.append(f"Status: {status_display}")
        lines.append("")

        if self.item_counts:
            total = sum(self.item_counts.values())
            lines.append(f"Items ({total}):")
            for item_type, count in self.item_counts.items():
                lines.append(f"  {item_type}: {count}")
            lines.append("")

        if self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            for w in self.warnings:
                line = f"  - {w.message}"
                if w.suggestion:
                    line += f" ({w.suggestion})"
                lines.append(line)
            lines.append("")

        if self.failed_sections:
            lines.append(f"Not Imported ({len(self.failed_sections)}):")
            for section in self.failed_sections:
                lines.append(f"  - {section}")
            lines.append("")

        return "\n".join(lines).rstrip()


class ImportResult(BaseModel):
    """Result of a character import operation."""

    character_name: str = Field(description="Name of the source character")
    items: list[ItemRecord] = Field(
        default_factory=list,
        description="Foundry items produced, classes first",
    )
    mapped_sections: list[str] = Field(
        default_factory=list,
        description="Sections that were mapped (possibly with skipped records)",
    )
    failed_sections: list[str] = Field(
        default_factory=list,
        description="Sections that could not be mapped at all",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Records skipped or degraded during import",
    )
    source: str = Field(default="file", description='Import source, e.g. "file"')
    source_id: int | None = Field(
        default=None,
        description="Original character ID on D&D Beyond",
    )

    def items_of_type(self, item_type: str) -> list[ItemRecord]:
        return [item for item in self.items if item.type == item_type]

    def build_report(self) -> ImportReport:
        """Build a structured ImportReport from this ImportResult."""
        if self.failed_sections and not self.mapped_sections:
            status = "failed"
        elif self.warnings or self.failed_sections:
            status = "success_with_warnings"
        else:
            status = "success"

        return ImportReport(
            status=status,
            character_name=self.character_name,
            item_counts=dict(Counter(item.type for item in self.items)),
            warnings=[_parse_warning(w) for w in self.warnings],
            failed_sections=self.failed_sections,
        )


def _parse_warning(warning_text: str) -> ImportWarning:
    """Parse a raw warning string into a structured ImportWarning."""
    section = "general"
    suggestion = ""

    lower = warning_text.lower()

    if "class" in lower:
        section = "classes"
        suggestion = "Check the class and subclass selections on D&D Beyond"
    elif "item" in lower or "inventory" in lower:
        section = "inventory"
        suggestion = "Re-export the character or add the item manually in Foundry"

    return ImportWarning(section=section, message=warning_text, suggestion=suggestion)
