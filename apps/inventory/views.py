"""
Views for catalog management.

- Product list with search and category filter
- Product create/edit/delete
- Category list for filter dropdowns
"""

from rest_framework import generics, status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from . import catalog
from .serializers import ProductSerializer


class ProductListCreateView(generics.ListCreateAPIView):
    """
    API endpoint for listing and creating products.

    Query parameters:
    - search: Match on name, description or category
    - category: Exact category filter
    """

    serializer_class = ProductSerializer

    def get_queryset(self):
        return catalog.list_products(
            search=self.request.query_params.get("search"),
            category=self.request.query_params.get("category"),
        )

    def perform_create(self, serializer):
        product_id = catalog.create_product(serializer.validated_data)
        serializer.instance = catalog.get_product(product_id)


class ProductDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    API endpoint for retrieving, updating and deleting a single product.
    """

    serializer_class = ProductSerializer
    lookup_field = "id"
    lookup_url_kwarg = "id"

    def get_queryset(self):
        return catalog.list_products()

    def perform_update(self, serializer):
        catalog.update_product(serializer.instance.pk, serializer.validated_data)
        serializer.instance = catalog.get_product(serializer.instance.pk)

    def perform_destroy(self, instance):
        catalog.delete_product(instance.pk)


@api_view(["GET"])
def product_categories(request):
    """Distinct category names for catalog filters."""
    return Response({"categories": catalog.list_categories()}, status=status.HTTP_200_OK)
