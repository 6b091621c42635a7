"""
URL configuration for catalog and purchase endpoints.
"""

from django.urls import path

from api.v1.catalog import views

urlpatterns = [
    path("products", views.ProductListView.as_view(), name="products"),
    path("products/<slug:slug>", views.ProductDetailView.as_view(), name="product-detail"),
    path("purchases", views.PurchasesView.as_view(), name="purchases"),
]
