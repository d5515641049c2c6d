from django.urls import re_path
from .views import create_checkout, order_status, stripe_webhook

# Trailing slashes are optional: payment providers and the frontend call
# these without one.
urlpatterns = [
    re_path(r'^checkout/?$', create_checkout, name='checkout'),
    re_path(r'^webhooks/stripe/?$', stripe_webhook, name='stripe-webhook'),
    re_path(r'^status/?$', order_status, name='order-status'),
]
