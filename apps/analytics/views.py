from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .exchange_rate import get_exchange_rate
from .statistics import get_statistics
from .serializers import (
    # Input serializers
    StatisticsQuerySerializer,
    # Response serializers
    StatisticsSerializer,
    ExchangeRateSerializer,
    ErrorSerializer,
)
from .exceptions import AnalyticsServiceError


@extend_schema(
    parameters=[
        OpenApiParameter(
            'period',
            OpenApiTypes.STR,
            description="Window ending today: 'week', 'month' or 'year'",
            default='month',
        ),
    ],
    responses={
        200: StatisticsSerializer,
        400: ErrorSerializer,
    },
    description="Revenue, investment, profit and collections of the user's orders in a period, "
                "with Bs. figures when the exchange rate is known.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def statistics(request):
    """Get the user's sales statistics - thin HTTP handler."""
    # Validate query parameters using input serializer
    query_serializer = StatisticsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        data = get_statistics(
            user=request.user,
            period=query_serializer.validated_data['period'],
        )
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(StatisticsSerializer(data).data)


@extend_schema(
    responses={200: ExchangeRateSerializer},
    description='Current USD to Bs. exchange rate, null when the source is unavailable.',
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def exchange_rate(request):
    """Get the cached exchange rate - thin HTTP handler."""
    rate = get_exchange_rate()
    return Response(ExchangeRateSerializer({'rate': rate, 'available': rate is not None}).data)
