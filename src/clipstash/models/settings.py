from typing import Optional

from pydantic import BaseModel, Field

from clipstash.models.hotkey import HotkeyBinding, Modifier


class Settings(BaseModel):
    """Process-wide preferences persisted between runs."""
    hotkey_key_code: Optional[int] = None
    hotkey_modifiers: Optional[int] = Field(default=None, ge=0)
    has_launched_before: bool = False

    def hotkey_binding(self) -> HotkeyBinding:
        if self.hotkey_key_code is None or self.hotkey_modifiers is None:
            return HotkeyBinding.default()
        return HotkeyBinding(
            key_code=self.hotkey_key_code,
            modifiers=Modifier(self.hotkey_modifiers),
        )

    def with_hotkey(self, binding: HotkeyBinding) -> "Settings":
        return self.model_copy(update={
            "hotkey_key_code": int(binding.key_code),
            "hotkey_modifiers": int(binding.modifiers),
        })
