from __future__ import annotations
from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

LETTERS = "ABCDEFGHIJ"

def kb_quiz_options(message_index: int, option_count: int) -> InlineKeyboardMarkup:
    # callback: quiz:<transcript index of the question>:<option index>
    b = InlineKeyboardBuilder()
    for i in range(option_count):
        b.button(text=LETTERS[i], callback_data=f"quiz:{message_index}:{i}")
    b.adjust(option_count)
    return b.as_markup()

def kb_quiz_answered(option_count: int, selected: int | None) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    for i in range(option_count):
        label = f"✅ {LETTERS[i]}" if i == selected else LETTERS[i]
        b.button(text=label, callback_data="quiz:done")
    b.adjust(option_count)
    return b.as_markup()
