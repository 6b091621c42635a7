"""
Catalog and purchase API views.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response

from api.v1 import providers
from api.v1.catalog.serializers import (
    PreviewPurchaseRequestSerializer,
    ProductSerializer,
    PurchasePreviewSerializer,
    PurchaseSerializer,
)
from api.views import GuardedAPIView
from products.application.commands.preview_purchase import PreviewPurchaseCommand
from products.application.queries.catalog_queries import (
    GetProductQuery,
    ListCatalogQuery,
    ListPurchasesQuery,
)


class ProductListView(GuardedAPIView):
    """Public product catalog."""

    require_auth = False

    @extend_schema(
        operation_id="list_products",
        summary="List products",
        tags=["Catalog"],
        responses={200: ProductSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        products = async_to_sync(providers.list_catalog_handler().handle)(ListCatalogQuery())
        return Response(ProductSerializer(products, many=True).data)


class ProductDetailView(GuardedAPIView):
    """One product by slug."""

    require_auth = False

    @extend_schema(
        operation_id="get_product",
        summary="Get product",
        tags=["Catalog"],
        responses={200: ProductSerializer, 404: {"description": "Product not found"}},
    )
    def get(self, request: Request, slug: str) -> Response:
        product = async_to_sync(providers.get_product_handler().handle)(GetProductQuery(slug=slug))
        return Response(ProductSerializer(product).data)


class PurchasesView(GuardedAPIView):
    """Purchases of the signed-in user, and the payment preview."""

    @extend_schema(
        operation_id="list_purchases",
        summary="My purchases",
        tags=["Catalog"],
        responses={200: PurchaseSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        purchases = async_to_sync(providers.list_purchases_handler().handle)(
            ListPurchasesQuery(user_id=self.user.id)
        )
        return Response(PurchaseSerializer(purchases, many=True).data)

    @extend_schema(
        operation_id="preview_purchase",
        summary="Preview purchase",
        description="Price a tier and return the payment redirect. Nothing is charged.",
        tags=["Catalog"],
        request=PreviewPurchaseRequestSerializer,
        responses={200: PurchasePreviewSerializer, 404: {"description": "Pricing tier not found"}},
    )
    def post(self, request: Request) -> Response:
        serializer = PreviewPurchaseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        preview = async_to_sync(providers.preview_purchase_handler().handle)(
            PreviewPurchaseCommand(
                user_id=self.user.id,
                pricing_tier_id=data["pricing_tier_id"],
                payment_method=data["payment_method"],
                product_id=data.get("product_id"),
            )
        )
        return Response(PurchasePreviewSerializer(preview).data)
