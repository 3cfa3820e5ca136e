import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger('api')


def _first_message(data):
    """Pull the first human readable message out of DRF error data."""
    if isinstance(data, dict):
        for field, value in data.items():
            message = _first_message(value)
            if field in ('detail', 'non_field_errors'):
                return message
            return f'{field}: {message}'
        return 'Invalid request'
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else 'Invalid request'
    return str(data)


def error_envelope_handler(exc, context):
    """
    Render every API error as {"error": "..."}.

    Unhandled exceptions become a logged 500 instead of Django's HTML page.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'API view'}",
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {'error': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    response.data = {'error': _first_message(response.data)}
    return response
