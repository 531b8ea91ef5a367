# arbcasino/keyboards/main.py
from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

BTN_SPIN = "🎰 Spin"
BTN_BALANCE = "💰 Balance"
BTN_CLAIM = "🎁 Claim all"
BTN_LEADERBOARD = "🏆 Leaderboard"


def main_menu_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=BTN_SPIN)],
            [KeyboardButton(text=BTN_BALANCE), KeyboardButton(text=BTN_CLAIM)],
            [KeyboardButton(text=BTN_LEADERBOARD)],
        ],
        resize_keyboard=True,
        input_field_placeholder="Spin the wheel…",
        selective=False,
        one_time_keyboard=False,
    )
