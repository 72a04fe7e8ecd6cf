import pytest

from clipstash.models import hotkey as hotkey_module
from clipstash.models.entry import Entry, EntryKind, Snapshot
from clipstash.models.hotkey import HotkeyBinding, KeyCode, Modifier
from clipstash.models.settings import Settings


def test_text_snapshot_identity_uses_decoded_text():
    from_text = Snapshot.from_text("hi")
    from_bytes = Snapshot(kind=EntryKind.TEXT, payload=b"hi")

    assert from_text.identity == from_bytes.identity == (EntryKind.TEXT, "hi")


def test_image_snapshot_identity_uses_bytes():
    assert Snapshot.from_image(b"\x01\x02").identity == (EntryKind.IMAGE, b"\x01\x02")


def test_entry_from_image_has_no_text():
    entry = Entry.from_snapshot(Snapshot.from_image(b"png"))

    assert entry.text is None
    assert entry.preview() == "[image 3 bytes]"
    assert entry.summary().kind is EntryKind.IMAGE


def test_entry_preview_truncates():
    entry = Entry.from_snapshot(Snapshot.from_text("x" * 150))
    assert entry.preview(10) == "x" * 10 + "..."


def test_display_orders_modifiers_like_the_menu_bar():
    binding = HotkeyBinding(
        key_code=ord("V"),
        modifiers=Modifier.SHIFT | Modifier.COMMAND,
    )
    assert binding.display() == "⌘ ⇧ V"

    every = HotkeyBinding(
        key_code=KeyCode.SPACE,
        modifiers=Modifier.COMMAND | Modifier.CONTROL | Modifier.OPTION | Modifier.SHIFT,
    )
    assert every.display() == "⌘ ⌃ ⌥ ⇧ Space"


def test_display_function_and_unknown_keys():
    assert HotkeyBinding(key_code=KeyCode.F1 + 4).display() == "F5"
    assert HotkeyBinding(key_code=0xE0).display() == "Key(224)"


def test_parse_keyboard_combo():
    binding = HotkeyBinding.parse("Ctrl+Alt+F12")

    assert binding.key_code == KeyCode.F12
    assert binding.modifiers == Modifier.CONTROL | Modifier.OPTION


@pytest.mark.parametrize("combo", ["", "ctrl+", "hyper+v", "ctrl+shift+f13"])
def test_parse_rejects_bad_combos(combo):
    with pytest.raises(ValueError):
        HotkeyBinding.parse(combo)


def test_to_combo_uses_platform_command_name(monkeypatch):
    binding = HotkeyBinding(key_code=ord("V"), modifiers=Modifier.COMMAND | Modifier.SHIFT)

    monkeypatch.setattr(hotkey_module.platform, "system", lambda: "Darwin")
    assert binding.to_combo() == "shift+command+v"

    monkeypatch.setattr(hotkey_module.platform, "system", lambda: "Windows")
    assert binding.to_combo() == "shift+windows+v"


def test_default_binding_per_platform(monkeypatch):
    monkeypatch.setattr(hotkey_module.platform, "system", lambda: "Darwin")
    assert HotkeyBinding.default() == HotkeyBinding(ord("V"), Modifier.COMMAND | Modifier.SHIFT)

    monkeypatch.setattr(hotkey_module.platform, "system", lambda: "Linux")
    assert HotkeyBinding.default() == HotkeyBinding(ord("V"), Modifier.CONTROL | Modifier.SHIFT)


def test_settings_fall_back_to_default_binding():
    assert Settings().hotkey_binding() == HotkeyBinding.default()


def test_settings_with_hotkey_round_trip():
    binding = HotkeyBinding(key_code=ord("B"), modifiers=Modifier.OPTION)
    settings = Settings().with_hotkey(binding)

    assert settings.hotkey_key_code == ord("B")
    assert settings.hotkey_modifiers == int(Modifier.OPTION)
    assert settings.hotkey_binding() == binding
