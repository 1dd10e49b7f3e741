# api/responses.py
"""JSON response helpers for the contact endpoint"""

from typing import Any, Dict

from flask import jsonify

JSON_CONTENT_TYPE = 'application/json; charset=utf-8'
METHOD_NOT_ALLOWED = 'Method not allowed'


def write_json(payload: Dict[str, Any], status: int = 200):
    """Serialize a result payload with the relay's content type"""
    response = jsonify(payload)
    response.status_code = status
    response.headers['Content-Type'] = JSON_CONTENT_TYPE
    return response


def method_not_allowed():
    """The only non-200 outcome of the contact endpoint"""
    return write_json({'success': False, 'error': METHOD_NOT_ALLOWED}, 405)
