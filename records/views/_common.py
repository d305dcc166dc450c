from rest_framework.response import Response

from records.serializers.common import PaginationQuerySerializer


def page_params(request) -> dict:
    """Validated ``page``/``limit`` keyword arguments from the query string."""
    s = PaginationQuerySerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    return {'page': s.validated_data['page'], 'limit': s.validated_data['limit']}


def paged_response(key: str, items: list, pagination: dict) -> Response:
    return Response({'success': True, 'data': {key: items, 'pagination': pagination}})
