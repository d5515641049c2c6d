from django.contrib import admin
from .models import Order

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'email', 'tier', 'status', 'created_at', 'completed_at', 'notified_at')
    list_filter = ('status', 'tier', 'created_at')
    search_fields = ('email', 'stripe_checkout_session_id', 'stripe_payment_intent_id')
    readonly_fields = (
        'id', 'created_at', 'updated_at', 'paid_at', 'completed_at', 'notified_at',
        'stripe_checkout_session_id', 'stripe_payment_intent_id', 'processing_task_id',
    )
