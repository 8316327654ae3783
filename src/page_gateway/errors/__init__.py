# 🚨 page_gateway/errors/__init__.py
"""
🚨 Пакет обробки помилок шлюзу.

🔹 `reason_codes`: перелік причин і HTTP-класи.
🔹 `strategies`: конвертація винятків httpx/Playwright у доменні.
🔹 `reason_mapper`: виняток → (ReasonCode, ctx) для відповіді.
"""
