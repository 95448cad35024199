"""
Validate and repair block JSON.

Errors are defects that cannot be repaired safely (missing or unknown block type);
the offending block is dropped and the result is marked invalid. Fixes are
defects normalized in place; they are recorded but do not affect validity.
"""

import copy
import json
from typing import Any

from blockpress.blocks.models import LEGACY_HEADING_TYPES, BlockType
from blockpress.common.models import Color
from blockpress.common.utils.config import get_config
from blockpress.common.utils.logger import logger
from blockpress.validator.models import (
    Issue,
    StructureValidation,
    ValidationReport,
    ValidationResult,
    ValidationSummary,
)

RICH_TEXT_TYPES = frozenset(
    {
        "paragraph",
        "heading_1",
        "heading_2",
        "heading_3",
        "bulleted_list_item",
        "numbered_list_item",
        "quote",
        "toggle",
        "callout",
        "to_do",
        "code",
    }
)
CONTAINER_TYPES = frozenset({"column_list", "column"})

# Only these types are dropped for an empty `{}` payload. Every other type either
# gets `{}` injected by the generic repair or is forced to `{}` (divider).
CONTENT_REQUIRED_TYPES = RICH_TEXT_TYPES | CONTAINER_TYPES

RICH_TEXT_ITEM_TYPES = ("text", "mention", "equation")
ANNOTATION_FLAGS = ("bold", "italic", "strikethrough", "underline", "code")
ICON_TYPES = ("emoji", "external", "file")


def _empty_run() -> dict[str, Any]:
    return {"type": "text", "text": {"content": ""}}


class BlockValidator:
    """Validate and fix block JSON. One instance can be reused; state resets per call."""

    def __init__(self, max_depth: int | None = None, code_languages: list[str] | None = None):
        cfg = get_config()
        self.max_depth = max_depth if max_depth is not None else cfg.max_depth
        self.code_languages = set(code_languages if code_languages is not None else cfg.code_languages)
        self.default_icon = cfg.default_callout_icon
        self.context_length = cfg.context_length
        self.errors: list[Issue] = []
        self.fixes: list[Issue] = []

    def validate_and_fix(self, data: Any) -> ValidationResult:
        """Validate a block list, a single block, or a `{children}` / `{data: {children}}` wrapper."""
        self.errors = []
        self.fixes = []

        data = copy.deepcopy(data)
        fixed_data: Any
        if isinstance(data, list):
            fixed_data = [item for item in (self._process_item(item) for item in data) if item is not None]
        else:
            fixed_data = self._process_item(data)

        logger.debug("Validation finished: %d errors, %d fixes", len(self.errors), len(self.fixes))
        return ValidationResult(
            is_valid=not self.errors,
            errors=list(self.errors),
            fixes=list(self.fixes),
            fixed_data=fixed_data,
        )

    def _process_item(self, item: Any) -> Any:
        if not isinstance(item, dict):
            self._add_error("Invalid item: not an object", item)
            return None

        data = item.get("data")
        if isinstance(data, dict) and "children" in data:
            return {**item, "data": {**data, "children": self._process_children(data["children"], 0)}}

        if "children" in item and "type" not in item:
            return {**item, "children": self._process_children(item["children"], 0)}

        return self._fix_block(item, 0)

    def _process_children(self, children: Any, depth: int) -> list[dict[str, Any]]:
        if not isinstance(children, list):
            self._add_error("Children must be an array", children)
            return []

        fixed = (self._fix_block(child, depth) for child in children)
        return [child for child in fixed if child is not None]

    def _fix_block(self, block: Any, depth: int) -> dict[str, Any] | None:
        if not isinstance(block, dict):
            self._add_error("Block is not a valid object", block)
            return None

        if depth > self.max_depth:
            self._add_error(f"Block exceeds maximum nesting depth of {self.max_depth}", block)
            return None

        block_type = block.get("type")
        if not block_type:
            self._add_error("Block missing type property", block)
            return None

        if block_type in LEGACY_HEADING_TYPES:
            block = dict(block)
            payload = block.pop(block_type, None)
            block["type"] = BlockType.HEADING_3.value
            if payload is not None:
                block[BlockType.HEADING_3.value] = payload
            self._add_fix(f"Converted {block_type} to heading_3", block)
            block_type = BlockType.HEADING_3.value

        if BlockType.parse(block_type) is None:
            self._add_error(f"Invalid block type: {block_type}", block)
            return None

        if self._is_empty(block):
            self._add_fix("Removed empty block", block)
            return None

        fixed = dict(block)

        if block_type in RICH_TEXT_TYPES:
            fixed = self._fix_rich_text_block(fixed)

        match block_type:
            case "to_do":
                fixed = self._fix_to_do(fixed)
            case "code":
                fixed = self._fix_code(fixed)
            case "callout":
                fixed = self._fix_callout(fixed)
            case "divider":
                if fixed.get("divider") != {}:
                    self._add_fix("Reset divider payload", block)
                fixed["divider"] = {}
            case "column_list" | "column":
                fixed = self._fix_container(fixed, depth)
            case _ if block_type not in RICH_TEXT_TYPES:
                if block_type not in fixed:
                    fixed[block_type] = {}
                    self._add_fix(f"Added missing {block_type} property", block)

        if "children" in fixed:
            fixed["children"] = self._process_children(fixed["children"], depth + 1)

        payload = fixed.get(block_type)
        if block_type not in CONTAINER_TYPES and isinstance(payload, dict) and "children" in payload:
            payload["children"] = self._process_children(payload["children"], depth + 1)

        return fixed

    def _is_empty(self, block: dict[str, Any]) -> bool:
        """A block with nothing besides its type, or an empty payload where content is required."""
        if set(block) <= {"type"}:
            return True

        block_type = block["type"]
        payload = block.get(block_type)
        if block_type not in CONTENT_REQUIRED_TYPES or not isinstance(payload, dict) or payload:
            return False
        # Containers usually keep their columns beside an empty payload.
        return not (block_type in CONTAINER_TYPES and block.get("children"))

    def _payload(self, block: dict[str, Any]) -> dict[str, Any]:
        block_type = block["type"]
        payload = block.get(block_type)
        if isinstance(payload, dict):
            return dict(payload)
        if payload is not None:
            self._add_fix(f"Replaced invalid {block_type} payload", block)
        return {}

    def _fix_rich_text_block(self, block: dict[str, Any]) -> dict[str, Any]:
        block_type = block["type"]
        content = self._payload(block)

        if "rich_text" not in content and isinstance(content.get("text"), list):
            content["rich_text"] = content.pop("text")
            self._add_fix(f"Renamed legacy text array to rich_text in {block_type}", block)

        if content.get("rich_text") is None:
            content["rich_text"] = []
            self._add_fix(f"Added missing rich_text array to {block_type}", block)
        elif not isinstance(content["rich_text"], list):
            content["rich_text"] = []
            self._add_fix(f"Converted rich_text to array in {block_type}", block)

        items = (self._fix_rich_text_item(item) for item in content["rich_text"])
        content["rich_text"] = [item for item in items if item is not None]

        if not content["rich_text"]:
            content["rich_text"] = [_empty_run()]
            self._add_fix(f"Added default empty rich_text item to {block_type}", block)

        if "color" in content and Color.parse(content["color"]) is None:
            del content["color"]
            self._add_fix(f"Removed invalid color from {block_type}", block)

        fixed = {**block, block_type: content}
        if "color" in fixed and Color.parse(fixed["color"]) is None:
            del fixed["color"]
            self._add_fix(f"Removed invalid color from {block_type} block", block)
        return fixed

    def _fix_rich_text_item(self, item: Any) -> dict[str, Any] | None:
        if not isinstance(item, dict):
            self._add_error("Rich text item is not a valid object", item)
            return None

        fixed = dict(item)

        if not fixed.get("type"):
            fixed["type"] = "text"
            self._add_fix("Added missing type to rich text item", item)
        elif fixed["type"] not in RICH_TEXT_ITEM_TYPES:
            fixed["type"] = "text"
            self._add_fix("Fixed invalid rich text type", item)

        if fixed["type"] == "text":
            text = fixed.get("text")
            if text is None:
                fixed["text"] = {"content": str(fixed.get("plain_text") or "")}
                self._add_fix("Added missing text property to rich text item", item)
            elif not isinstance(text, dict):
                fixed["text"] = {"content": str(text)}
                self._add_fix("Converted text property to object", item)
            elif not isinstance(text.get("content"), str):
                content = text.get("content")
                fixed["text"] = {**text, "content": "" if content is None else str(content)}
                self._add_fix("Added missing content to text property", item)

        if "annotations" in fixed:
            annotations = self._fix_annotations(fixed["annotations"], item)
            if annotations is None:
                del fixed["annotations"]
            else:
                fixed["annotations"] = annotations

        return fixed

    def _fix_annotations(self, annotations: Any, item: Any) -> dict[str, Any] | None:
        if not isinstance(annotations, dict):
            self._add_fix("Removed invalid annotations", item)
            return None

        fixed: dict[str, Any] = {}
        for key in ANNOTATION_FLAGS:
            if key in annotations and annotations[key] is not None:
                fixed[key] = bool(annotations[key])

        if "color" in annotations:
            if Color.parse(annotations["color"]) is not None:
                fixed["color"] = annotations["color"]
            else:
                self._add_fix("Removed invalid annotation color", item)

        return fixed or None

    def _fix_to_do(self, block: dict[str, Any]) -> dict[str, Any]:
        content = block["to_do"]
        if "checked" not in content:
            content["checked"] = False
            self._add_fix("Added missing checked property to to_do block", block)
        elif not isinstance(content["checked"], bool):
            content["checked"] = bool(content["checked"])
            self._add_fix("Coerced checked property to boolean", block)
        return block

    def _fix_code(self, block: dict[str, Any]) -> dict[str, Any]:
        content = block["code"]
        language = content.get("language")
        if language is None:
            return block

        normalized = str(language).lower()
        if normalized not in self.code_languages:
            content["language"] = "plain_text"
            self._add_fix("Fixed invalid language in code block", block)
        elif normalized != language:
            content["language"] = normalized
            self._add_fix("Normalized language casing in code block", block)
        return block

    def _fix_callout(self, block: dict[str, Any]) -> dict[str, Any]:
        content = block["callout"]
        icon = content.get("icon")
        if icon is not None and (not isinstance(icon, dict) or icon.get("type") not in ICON_TYPES):
            content["icon"] = {"type": "emoji", "emoji": self.default_icon}
            self._add_fix("Replaced invalid callout icon", block)
        return block

    def _fix_container(self, block: dict[str, Any], depth: int) -> dict[str, Any]:
        block_type = block["type"]
        content = self._payload(block)

        if "children" not in content and "children" not in block:
            content["children"] = []
            self._add_fix(f"Added missing children to {block_type}", block)

        if "children" in content:
            content["children"] = self._process_children(content["children"], depth + 1)

        return {**block, block_type: content}

    def _context(self, context: Any) -> str:
        return json.dumps(context, indent=2, ensure_ascii=False, default=str)[: self.context_length]

    def _add_error(self, message: str, context: Any) -> None:
        logger.debug("Validation error: %s", message)
        self.errors.append(Issue(message=message, context=self._context(context)))

    def _add_fix(self, message: str, context: Any) -> None:
        logger.debug("Validation fix: %s", message)
        self.fixes.append(Issue(message=message, context=self._context(context)))


def validate_final_structure(data: Any) -> StructureValidation:
    """Check that every top-level item of a fixed list is a block or a children wrapper."""
    errors: list[str] = []

    if isinstance(data, list):
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                errors.append(f"Item {index}: Missing block structure")
            elif isinstance(item.get("data"), dict) and "children" in item["data"]:
                if not isinstance(item["data"]["children"], list):
                    errors.append(f"Item {index}: data.children must be an array")
            elif not item.get("type") and not isinstance(item.get("children"), list):
                errors.append(f"Item {index}: Missing block structure")

    return StructureValidation(is_valid=not errors, errors=errors)


def validate_and_fix(data: Any) -> ValidationResult:
    return BlockValidator().validate_and_fix(data)


def validate_and_fix_json(data: Any) -> ValidationReport:
    """Validate and fix, then add a structure check and summary counts."""
    result = validate_and_fix(data)
    structure = validate_final_structure(result.fixed_data)

    return ValidationReport(
        **result.model_dump(),
        structure_validation=structure,
        summary=ValidationSummary(
            total_errors=len(result.errors),
            total_fixes=len(result.fixes),
            is_fully_valid=result.is_valid and structure.is_valid,
        ),
    )
