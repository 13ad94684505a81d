from rest_framework import serializers

from .models import SORT_ORDERINGS, Country


class CountrySerializer(serializers.ModelSerializer):
    class Meta:
        model = Country
        fields = [
            'id', 'name', 'capital', 'region', 'population',
            'currency_code', 'exchange_rate', 'estimated_gdp',
            'flag_url', 'last_refreshed_at'
        ]


class CountryRefreshSerializer(serializers.Serializer):
    """
    Validation rules for a refresh candidate (data from the external APIs):
    - name is required and non-empty
    - population is a non-negative integer
    - exchange_rate is positive when present
    - everything else is optional
    Uniqueness of name is left to the database so the whole replace rolls back.
    """
    name = serializers.CharField(max_length=200)
    capital = serializers.CharField(max_length=200, allow_null=True, allow_blank=True, required=False)
    region = serializers.CharField(max_length=100, allow_null=True, allow_blank=True, required=False)
    population = serializers.IntegerField(min_value=0)
    currency_code = serializers.CharField(max_length=10, allow_null=True, required=False)
    exchange_rate = serializers.FloatField(allow_null=True, required=False)
    estimated_gdp = serializers.FloatField(allow_null=True, required=False)
    flag_url = serializers.CharField(max_length=500, allow_null=True, allow_blank=True, required=False)

    def validate_population(self, value):
        # IntegerField accepts "12" and 12.0; upstream must send a real int
        raw = self.initial_data.get("population")
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise serializers.ValidationError("must be an integer")
        return value

    def validate_exchange_rate(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError("must be a positive number")
        return value


class CountryListQuerySerializer(serializers.Serializer):
    """GET /countries query string."""
    region = serializers.CharField(required=False, allow_blank=True)
    currency = serializers.CharField(required=False, allow_blank=True)
    sort = serializers.ChoiceField(choices=sorted(SORT_ORDERINGS), required=False)


class StatusSerializer(serializers.Serializer):
    total_countries = serializers.IntegerField()
    last_refreshed_at = serializers.DateTimeField(allow_null=True)


class RefreshResultSerializer(serializers.Serializer):
    """POST /countries/refresh acknowledgement; timestamps match CountrySerializer."""
    message = serializers.CharField()
    total_countries = serializers.IntegerField()
    last_refreshed_at = serializers.DateTimeField()
    image_generated = serializers.BooleanField()
    duration_seconds = serializers.FloatField()
