from rest_framework import serializers

from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    author = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ["id", "product", "author", "rating", "comment", "created_at", "updated_at"]
        read_only_fields = fields

    def get_author(self, obj: Review) -> str:
        return obj.user.get_full_name() or obj.user.get_username()


class ReviewSubmitSerializer(serializers.Serializer):
    """Shape only; rating and comment rules are enforced by ``submit_review``."""

    rating = serializers.IntegerField()
    comment = serializers.CharField(allow_blank=True, trim_whitespace=False)
