# field_editor.py
# -*- coding: utf-8 -*-
"""Validated mutations of the in-memory player record, driven by config.EDITABLE_FIELDS."""
import logging
import re

import config
from errors import ValidationError

CONTRACT_FIELDS = config.EDITABLE_FIELDS[config.CONTRACTS_KEY]["fields"]

_TRUE_WORDS = {"true", "yes", "y", "1"}
_FALSE_WORDS = {"false", "no", "n", "0"}
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def scalar_fields(schema=None):
    """Editable (name, field_def) pairs that are not nested objects, in schema order."""
    schema = config.EDITABLE_FIELDS if schema is None else schema
    return [(key, field_def) for key, field_def in schema.items() if field_def.get("type") != "object"]


def describe_range(field_def):
    if field_def.get("type") == "number":
        return f"min: {field_def.get('min')}, max: {field_def.get('max')}"
    if field_def.get("type") == "boolean":
        return "true/false"
    return ""


def parse_field_value(field_def, raw_input):
    """Converts user input to the field's declared type.

    Raises ValidationError if the text does not parse or a number falls
    outside [min, max].
    """
    text = str(raw_input).strip()
    kind = field_def.get("type")
    if not text:
        raise ValidationError("No value entered.")

    if kind == "number":
        if not _INTEGER_PATTERN.fullmatch(text):
            raise ValidationError(f"'{text}' is not a whole number.")
        value = int(text)
        low, high = field_def.get("min"), field_def.get("max")
        if (low is not None and value < low) or (high is not None and value > high):
            raise ValidationError(f"{value} is out of range ({describe_range(field_def)}).")
        return value

    if kind == "boolean":
        lowered = text.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise ValidationError(f"'{text}' is not true or false.")

    raise ValidationError(f"Fields of type '{kind}' cannot be set directly.")


def get_field(record, key):
    """Current value of a top-level field; 0 when the save does not have it yet."""
    value = record.get(key)
    return 0 if value is None else value


def set_field(record, key, raw_input, schema=None):
    """Validated write of a top-level scalar field.

    Returns (ok: bool, message: str). On rejection the record is left untouched.
    """
    schema = config.EDITABLE_FIELDS if schema is None else schema
    field_def = schema.get(key)
    if field_def is None:
        logging.warning(f"Attempt to edit non-editable field '{key}'.")
        return False, f"'{key}' is not an editable field."
    if field_def.get("type") == "object":
        return False, f"'{key}' must be edited through its own menu."

    current = get_field(record, key)
    try:
        value = parse_field_value(field_def, raw_input)
    except ValidationError as e:
        logging.info(f"Rejected value for '{key}': {e}")
        return False, f"Invalid value ({e}) Keeping current value: {current}"

    record[key] = value
    logging.info(f"Field '{key}' changed: {current} -> {value}")
    return True, f"{key} updated to: {value}"


# --- Contracts ---

def get_contracts(record):
    """The contract list, or an empty list if the save has none."""
    contracts = record.get(config.CONTRACTS_KEY)
    return contracts if isinstance(contracts, list) else []


def set_contract_field(record, index, key, raw_input):
    """Validated write of one field of the contract at `index` (0-based).

    Returns (ok: bool, message: str).
    """
    contracts = get_contracts(record)
    if index < 0 or index >= len(contracts):
        return False, f"No contract number {index + 1}."
    field_def = CONTRACT_FIELDS.get(key)
    if field_def is None:
        return False, f"'{key}' is not an editable contract field."

    contract = contracts[index]
    current = contract.get(key)
    try:
        value = parse_field_value(field_def, raw_input)
    except ValidationError as e:
        logging.info(f"Rejected value for contract {contract.get('id')}.{key}: {e}")
        return False, f"Invalid value ({e}) Keeping current value: {current}"

    contract[key] = value
    logging.info(f"Contract '{contract.get('id')}' {key}: {current} -> {value}")
    return True, f"{key} set to: {value}"


def toggle_contract_flag(record, index, key):
    """Flips a boolean contract field and returns the new value."""
    if CONTRACT_FIELDS.get(key, {}).get("type") != "boolean":
        raise ValidationError(f"'{key}' is not a boolean contract field.")
    contract = get_contracts(record)[index]
    contract[key] = not bool(contract.get(key))
    logging.info(f"Contract '{contract.get('id')}' {key} toggled to {contract[key]}")
    return contract[key]


def mark_all_taken(record):
    contracts = get_contracts(record)
    for contract in contracts:
        contract["isTaken"] = True
    logging.info(f"Marked {len(contracts)} contracts as taken.")
    return len(contracts)


def mark_all_completed(record):
    # done implies taken
    contracts = get_contracts(record)
    for contract in contracts:
        contract["isDone"] = True
        contract["isTaken"] = True
    logging.info(f"Marked {len(contracts)} contracts as completed.")
    return len(contracts)


def reset_all_contracts(record):
    contracts = get_contracts(record)
    for contract in contracts:
        contract["reputationPoints"] = 0
        contract["isDone"] = False
        contract["isTaken"] = False
    logging.info(f"Reset {len(contracts)} contracts.")
    return len(contracts)
