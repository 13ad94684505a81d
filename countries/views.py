from dataclasses import asdict

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .exceptions import SummaryImageNotFound, ValidationFailed
from .models import Country
from .refresh import refresh_countries as run_refresh
from .serializers import (
    CountryListQuerySerializer,
    CountrySerializer,
    RefreshResultSerializer,
    StatusSerializer,
)
from .summary import load_summary_image


@api_view(['POST'])
def refresh_countries(request):
    """
    POST /countries/refresh
    Fetch countries and exchange rates, then replace the cached table.
    503 when an upstream is down, 400 when a record fails validation.
    """
    result = run_refresh()
    payload = RefreshResultSerializer({
        "message": "Countries refreshed successfully",
        **asdict(result),
    })
    return Response(payload.data, status=status.HTTP_200_OK)


@api_view(['GET'])
def list_countries(request):
    """
    GET /countries
    Filters:
      - ?region=Africa, ?currency=NGN (case-insensitive)
    Sorting:
      - ?sort=gdp_desc | gdp_asc | name_asc | name_desc
    Default:
      - Ordered by name ascending. Null GDPs sort last either way.
    """
    query = CountryListQuerySerializer(data=request.query_params)
    if not query.is_valid():
        details = {field: str(messages[0]) for field, messages in query.errors.items()}
        raise ValidationFailed(details=details)

    params = query.validated_data
    qs = (
        Country.objects
        .filtered(region=params.get("region"), currency=params.get("currency"))
        .sorted_by(params.get("sort"))
    )
    return Response(CountrySerializer(qs, many=True).data)


@api_view(['GET', 'DELETE'])
def country_detail(request, name):
    """
    GET /countries/:name  -> 404 JSON if not found
    DELETE /countries/:name -> delete, return 204 or 404
    """
    if request.method == 'GET':
        country = Country.objects.get_by_name(name)
        return Response(CountrySerializer(country).data)

    Country.objects.delete_by_name(name)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def get_status(request):
    """
    GET /status -> { total_countries, last_refreshed_at }
    last_refreshed_at is max(last_refreshed_at) across records (or null)
    """
    total = Country.objects.count()
    last = Country.objects.latest_refresh()
    return Response(StatusSerializer({"total_countries": total, "last_refreshed_at": last}).data)


@api_view(['GET'])
def get_summary_image(request):
    """
    GET /countries/image
    Serve the latest summary PNG (database slot, then cache file).
    """
    png = load_summary_image()
    if png is None:
        raise SummaryImageNotFound()
    return HttpResponse(png, content_type='image/png')
