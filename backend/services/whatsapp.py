"""
Visitas CRM - Link de WhatsApp a partir del contacto cargado

Pipeline:
  1. Quedarse solo con los dígitos
  2. Menos de 5 dígitos → no es un número
  3. Sacar los ceros iniciales
  4. Prefijo celular: 549 se respeta, 54 pasa a 549, si no se antepone 549
"""

from config import WHATSAPP_PREFIX

WHATSAPP_SEND_URL = "https://api.whatsapp.com/send?phone={number}"
MIN_DIGITS = 5


class InvalidContactError(ValueError):
    """El contacto no tiene un número utilizable."""


def normalize_whatsapp_number(contact_info: str, prefix: str = None) -> str:
    prefix = prefix or WHATSAPP_PREFIX
    country = prefix[:2]

    digits = ''.join(filter(str.isdigit, contact_info or ""))
    if len(digits) < MIN_DIGITS:
        raise InvalidContactError("Número no válido.")

    digits = digits.lstrip("0")

    if digits.startswith(prefix):
        return digits
    if digits.startswith(country):
        return prefix + digits[len(country):]
    return prefix + digits


def build_whatsapp_link(contact_info: str, prefix: str = None) -> str:
    return WHATSAPP_SEND_URL.format(number=normalize_whatsapp_number(contact_info, prefix))
