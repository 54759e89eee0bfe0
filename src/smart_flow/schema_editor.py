"""
Dual-mode output schema editor.

The editor has two modes:

- Visual: the author ticks fields on later screens; the schema text is
  regenerated on every toggle.
- Code: the author edits the schema text freely.

The modes are not kept in sync continuously. Switching performs a single
conversion in one direction: Visual to Code regenerates the text from the
selection, Code to Visual re-reads the selection from the text and then
regenerates it. The second conversion is refused while the text is not
valid JSON.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from enum import Enum

from smart_flow.exceptions import InvalidOutputSchemaError
from smart_flow.models.field_definitions import Screen
from smart_flow.schema_builder import (
    build_output_schema,
    load_output_schema,
    parse_schema_to_selected_fields,
    selected_fields_from_schema,
)

logger = logging.getLogger(__name__)

INVALID_SCHEMA_MESSAGE = "Invalid JSON schema. Fix errors before switching to visual mode."


class EditorMode(str, Enum):
    VISUAL = "visual"
    CODE = "code"


class SchemaEditor:
    """
    State of the output schema editor for one screen.

    Usage:
        editor = SchemaEditor(screen.ai_output_schema or "", later_screens)
        editor.toggle_field("employeeName")
        editor.switch_to_code()
        editor.edit_code(text)
        if not editor.switch_to_visual():
            show(editor.error)
    """

    def __init__(
        self,
        value: str = "",
        subsequent_screens: Sequence[Screen] = (),
        on_change: Callable[[str], None] | None = None,
    ):
        """
        Args:
            value: Output schema text currently stored for the screen.
            subsequent_screens: Screens whose fields can be selected.
            on_change: Called with the new text whenever the editor changes it.
        """
        self.value = value
        self.subsequent_screens = list(subsequent_screens)
        self.mode = EditorMode.VISUAL
        self.selected_fields: set[str] = parse_schema_to_selected_fields(value)
        self.error: str | None = None
        self._on_change = on_change
        self._last_synced = value
        self._sync_from_selection()

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def _emit(self, schema: str) -> None:
        if schema == self.value:
            return
        self.value = schema
        if self._on_change is not None:
            self._on_change(schema)

    def _sync_from_selection(self) -> None:
        if self.mode is not EditorMode.VISUAL or not self.subsequent_screens:
            return

        generated = build_output_schema(self.selected_fields, self.subsequent_screens)

        # A stored schema naming fields that no later screen has produces no
        # properties; keep its text unless the author cleared the selection.
        if generated.properties or not self.selected_fields:
            schema = generated.to_json()
            self._last_synced = schema
            self._emit(schema)

    def set_value(self, value: str) -> None:
        """Accept schema text supplied from outside the editor."""
        if self.mode is EditorMode.CODE:
            self.value = value
            return
        if value == self._last_synced:
            return
        self.value = value
        self.selected_fields = parse_schema_to_selected_fields(value)
        self._last_synced = value

    def set_subsequent_screens(self, subsequent_screens: Sequence[Screen]) -> None:
        """Replace the selectable screens, e.g. after the flow was edited."""
        self.subsequent_screens = list(subsequent_screens)
        self._sync_from_selection()

    def toggle_field(self, field_name: str) -> None:
        """Select or deselect a field (visual mode only)."""
        if self.mode is not EditorMode.VISUAL:
            raise RuntimeError("Fields can only be toggled in visual mode")
        if field_name in self.selected_fields:
            self.selected_fields.discard(field_name)
        else:
            self.selected_fields.add(field_name)
        self._sync_from_selection()

    def select_fields(self, field_names: Iterable[str]) -> None:
        """Replace the whole selection (visual mode only)."""
        if self.mode is not EditorMode.VISUAL:
            raise RuntimeError("Fields can only be selected in visual mode")
        self.selected_fields = set(field_names)
        self._sync_from_selection()

    def clear_selection(self) -> None:
        self.select_fields(())

    def edit_code(self, text: str) -> None:
        """Replace the schema text (code mode only)."""
        if self.mode is not EditorMode.CODE:
            raise RuntimeError("Schema text can only be edited in code mode")
        self.value = text
        if self._on_change is not None:
            self._on_change(text)

    def switch_to_code(self) -> None:
        """Regenerate the text from the selection and enter code mode."""
        if self.mode is EditorMode.CODE:
            return
        schema = build_output_schema(self.selected_fields, self.subsequent_screens).to_json()
        self._last_synced = schema
        self._emit(schema)
        self.mode = EditorMode.CODE

    def switch_to_visual(self) -> bool:
        """
        Re-read the selection from the text and enter visual mode.

        The text is then regenerated from the selection as on a toggle, so
        hand edits to descriptions or shapes of known fields are replaced.

        Returns:
            False, with ``error`` set and nothing else changed, when the
            text is not a valid JSON object.
        """
        if self.mode is EditorMode.VISUAL:
            return True
        try:
            schema = load_output_schema(self.value)
        except InvalidOutputSchemaError as e:
            logger.debug("Refusing switch to visual mode: %s", e)
            self.error = INVALID_SCHEMA_MESSAGE
            return False

        self.selected_fields = selected_fields_from_schema(schema)
        self._last_synced = self.value
        self.error = None
        self.mode = EditorMode.VISUAL
        self._sync_from_selection()
        return True

    def toggle_mode(self) -> bool:
        """Switch to the other mode; False if the switch was refused."""
        if self.mode is EditorMode.VISUAL:
            self.switch_to_code()
            return True
        return self.switch_to_visual()
