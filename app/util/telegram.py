# app/util/telegram.py
"""
Telegram WebApp initData verification.
https://core.telegram.org/bots/webapps#validating-data-received-via-the-web-app
"""
import hashlib
import hmac
import json
from typing import Optional
from urllib.parse import parse_qsl


def _pairs(init_data: str) -> list:
  return parse_qsl(init_data or "", keep_blank_values=True)


def _digest(fields: dict, bot_token: str) -> str:
  check = "\n".join(f"{k}={v}" for k, v in sorted(fields.items()))
  secret = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
  return hmac.new(secret, check.encode(), hashlib.sha256).hexdigest()


def verify_init_data(init_data: Optional[str], bot_token: Optional[str]) -> dict:
  if not init_data or not isinstance(init_data, str):
    return {"ok": False, "reason": "missing_init_data"}
  if not bot_token:
    return {"ok": False, "reason": "missing_bot_token"}

  params = dict(_pairs(init_data))
  got = params.pop("hash", None)
  if not got:
    return {"ok": False, "reason": "missing_hash"}

  if not hmac.compare_digest(_digest(params, bot_token).encode(), got.encode()):
    return {"ok": False, "reason": "bad_hash"}
  return {"ok": True, "reason": None}


def extract_user(init_data: Optional[str]) -> Optional[dict]:
  raw = dict(_pairs(init_data or "")).get("user")
  if not raw:
    return None
  try:
    user = json.loads(raw)
  except ValueError:
    return None
  return user if isinstance(user, dict) else None


def extract_user_id(init_data: Optional[str]) -> Optional[int]:
  uid = (extract_user(init_data) or {}).get("id")
  if isinstance(uid, bool) or not isinstance(uid, int):
    return None
  return uid


def sign_init_data(fields: dict, bot_token: str) -> dict:
  """`fields` plus the `hash` Telegram would attach; for local clients and tests."""
  return {**fields, "hash": _digest(fields, bot_token)}
