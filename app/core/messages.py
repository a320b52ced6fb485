"""Short user-facing messages. Raw backing-store errors never reach the client; they are logged instead."""
from app.config import settings

MESSAGES = {
    "en": {
        "invalid_credentials": "Invalid email or password",
        "invalid_code": "Invalid code",
        "code_format": "The code must be 6 digits",
        "code_expired": "The code has expired, request a new one",
        "too_many_attempts": "Too many attempts, request a new code",
        "no_pending_login": "No login is waiting for a code",
        "code_sent": "A code has been sent",
        "login_failed": "Login failed",
        "not_authenticated": "Invalid or expired token",
        "profile_not_found": "Profile not found",
        "access_denied": "Access denied",
        "tool_not_found": "Tool not found",
        "comment_not_found": "Comment not found",
        "category_not_found": "Category not found",
        "category_exists": "A category with this name already exists",
        "rating_range": "Rating must be an integer between 1 and 5",
        "comment_empty": "Comment cannot be empty",
        "invalid_transition": "This status change is not allowed",
        "service_unavailable": "The service is temporarily unavailable, try again",
        "no_reason_given": "No reason given",
    },
    "bg": {
        "invalid_credentials": "Невалиден имейл или парола",
        "invalid_code": "Невалиден код",
        "code_format": "Кодът трябва да е от 6 цифри",
        "code_expired": "Кодът е изтекъл, заявете нов",
        "too_many_attempts": "Твърде много опити, заявете нов код",
        "no_pending_login": "Няма вход, който чака код",
        "code_sent": "Код е изпратен на вашия имейл",
        "login_failed": "Грешка при влизане",
        "not_authenticated": "Невалидна или изтекла сесия",
        "profile_not_found": "Профилът не е намерен",
        "access_denied": "Достъп отказан",
        "tool_not_found": "Инструментът не е намерен",
        "comment_not_found": "Коментарът не е намерен",
        "category_not_found": "Категорията не е намерена",
        "category_exists": "Вече има категория с това име",
        "rating_range": "Оценката трябва да е цяло число от 1 до 5",
        "comment_empty": "Коментарът не може да е празен",
        "invalid_transition": "Тази промяна на статуса не е позволена",
        "service_unavailable": "Услугата е временно недостъпна, опитайте отново",
        "no_reason_given": "Няма посочена причина",
    },
}


def msg(key: str) -> str:
    table = MESSAGES.get(settings.locale, MESSAGES["en"])
    return table.get(key) or MESSAGES["en"][key]
