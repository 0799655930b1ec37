"""Telegram notifications for combine runs"""

import requests

from xml_combine import config
from xml_combine.logger import get_logger

logger = get_logger("notification")


class TelegramNotifier:
    API_URL = "https://api.telegram.org/bot{token}/sendMessage"

    @classmethod
    def _get_user_ids(cls):
        """Telegram user ids from TELEGRAM_USER_IDS (comma separated)"""
        user_ids_str = config.TELEGRAM_USER_IDS
        if user_ids_str and user_ids_str.strip():
            try:
                return list(map(int, user_ids_str.split(",")))
            except ValueError:
                logger.warning(f"Invalid TELEGRAM_USER_IDS: {user_ids_str}")
                return []
        return []

    @classmethod
    def notify(cls, text: str):
        """Send a notification to every configured Telegram user"""
        user_ids = cls._get_user_ids()
        if not config.TELEGRAM_BOT_TOKEN or not user_ids:
            logger.info(f"Telegram notification: {text}")
            return

        api_url = cls.API_URL.format(token=config.TELEGRAM_BOT_TOKEN)
        for user_id in user_ids:
            payload = {
                "chat_id": user_id,
                "text": text,
                "parse_mode": "HTML"
            }
            try:
                response = requests.post(api_url, json=payload, timeout=config.TELEGRAM_TIMEOUT)
                response.raise_for_status()
                logger.debug(f"Message sent to user {user_id}")
            except requests.RequestException as e:
                logger.error(f"Failed to send message to user {user_id}: {e}")
