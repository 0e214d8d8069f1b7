"""Тексты сообщений бота."""

WELCOME = (
    "<b>💰 Welcome to @NotExpenseBot!</b>\n\n"
    "This bot makes it easy to track and save your expenses "
    "directly to a Notion database.\n\n"
    "Use /help to see available commands."
)
NOT_AUTHORIZED = "❗ You are not authorized to use this bot."
IDLE_HINT = "ℹ️ Use /new to add a new expense."

NEW_EXPENSE = "➕ Let's add a new expense!"
CATEGORY_LABEL = "category"
SUBCATEGORY_LABEL = "subcategory"
CHOOSE_TEMPLATE = "🗂️ Choose a {label}:"
AMOUNT_PROMPT_TEMPLATE = "💵 Enter the expense amount in {currency}:"

INVALID_CATEGORY = "❌ Invalid category. Please choose from the existing ones."
INVALID_SUBCATEGORY = "❌ Invalid subcategory. Please choose from the existing ones."
INVALID_AMOUNT = "❌ Invalid amount. Please enter a number."
NEGATIVE_AMOUNT = "❌ The amount cannot be negative."

WAITING = "⌛️"
COMMIT_FAILED = "❌ Error adding expense. Please try again."
UNEXPECTED_ERROR = "❌ Something went wrong. Please try again with /new."
