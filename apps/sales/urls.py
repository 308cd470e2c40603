"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    # POS cart
    path("api/pos/cart/", views.cart_detail, name="cart_detail"),
    path("api/pos/cart/lines/", views.cart_add_line, name="cart_add_line"),
    path(
        "api/pos/cart/lines/<int:product_id>/", views.cart_line_detail, name="cart_line_detail"
    ),
    path("api/pos/cart/clear/", views.cart_clear, name="cart_clear"),
    path("api/pos/cart/customer/", views.cart_customer, name="cart_customer"),
    # Checkout and payment
    path("api/pos/checkout/", views.pos_checkout, name="pos_checkout"),
    path(
        "api/orders/<int:order_id>/payment-request/",
        views.order_payment_request,
        name="order_payment_request",
    ),
    path("api/orders/<int:order_id>/outcome/", views.order_outcome, name="order_outcome"),
    # Orders
    path("api/orders/", views.OrderListView.as_view(), name="order_list"),
    path("api/orders/summary/", views.order_summary, name="order_summary"),
    path("api/orders/<int:order_id>/", views.OrderDetailView.as_view(), name="order_detail"),
    path("api/generate-qr/", views.generate_qr, name="generate_qr"),
]
