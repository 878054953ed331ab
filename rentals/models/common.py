"""
Column helpers shared by the models
"""

import uuid


def generate_uuid():
    return str(uuid.uuid4())


def enum_values(enum_cls):
    """Persist enum members by their lowercase value, not their name"""
    return [member.value for member in enum_cls]
