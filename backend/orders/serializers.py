import os

from django.conf import settings
from rest_framework import serializers

from .models import Order

ALLOWED_AUDIO_EXTENSIONS = ('.mp3', '.wav', '.m4a', '.flac', '.ogg', '.aac')


class CheckoutSerializer(serializers.Serializer):
    """Validates the upload form before anything is stored or charged"""
    audio_file = serializers.FileField(error_messages={'required': 'Audio file is required'})
    lyrics = serializers.CharField(trim_whitespace=True, error_messages={
        'required': 'Lyrics are required',
        'blank': 'Lyrics are required',
    })
    email = serializers.EmailField(error_messages={
        'required': 'Email is required',
        'invalid': 'Invalid email format',
    })
    confirm_email = serializers.EmailField(required=False)
    tier = serializers.ChoiceField(choices=Order.TIER_CHOICES)

    def validate_audio_file(self, value):
        if value.size > settings.MAX_AUDIO_UPLOAD_BYTES:
            limit_mb = settings.MAX_AUDIO_UPLOAD_BYTES // (1024 * 1024)
            raise serializers.ValidationError(f"File must be under {limit_mb} MB")
        ext = os.path.splitext(value.name)[1].lower()
        if ext not in ALLOWED_AUDIO_EXTENSIONS:
            raise serializers.ValidationError(f"Unsupported audio format '{ext or value.name}'")
        return value

    def validate(self, attrs):
        confirm = attrs.get('confirm_email')
        if confirm is not None and confirm.lower() != attrs['email'].lower():
            raise serializers.ValidationError({'confirm_email': 'Emails must match'})
        return attrs


class OrderStatusSerializer(serializers.ModelSerializer):
    """Status payload returned to polling clients"""
    order_id = serializers.UUIDField(source='id', read_only=True)

    class Meta:
        model = Order
        fields = ['order_id', 'status']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if instance.status == Order.DONE:
            urls = {
                'lrc_url': instance.lrc_url,
                'srt_url': instance.srt_url,
            }
            if instance.video_url:
                urls['video_url'] = instance.video_url
            data['urls'] = urls
            if instance.expires_at:
                data['expires_at'] = instance.expires_at.isoformat()
        elif instance.status == Order.FAILED:
            data['error'] = instance.error_message
        return data
