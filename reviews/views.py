"""Product review endpoints."""

from catalog.models import Product
from common.responses import invalid_input_response, result_response
from common.results import ActionResult, run_action
from common.throttling import StoreScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from .selectors import list_product_reviews, product_review_stats
from .serializers import ReviewSerializer, ReviewSubmitSerializer
from .services import submit_review

ResultSchema = inline_serializer(
    name="ReviewResult",
    fields={
        "success": rf_serializers.BooleanField(),
        "message": rf_serializers.CharField(),
        "data": rf_serializers.JSONField(required=False),
    },
)


class ProductReviewsView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [StoreScopedRateThrottle]

    def get_throttles(self):
        self.throttle_scope = "reviews_write" if self.request.method == "POST" else "reviews"
        return super().get_throttles()

    @extend_schema(
        tags=["Review Endpoints"],
        summary="List product reviews",
        description="Returns the product's reviews with average rating and per-star counts.",
        responses={200: ResultSchema, 404: ResultSchema},
    )
    def get(self, request, product_id: int):
        if not Product.objects.filter(id=product_id, is_active=True).exists():
            return result_response(ActionResult.fail("Product not found", error="not_found"), request=request)
        data = {
            "stats": product_review_stats(product_id=product_id),
            "reviews": ReviewSerializer(list_product_reviews(product_id=product_id), many=True).data,
        }
        return result_response(ActionResult.ok("Reviews retrieved", data), request=request)

    @extend_schema(
        tags=["Review Endpoints"],
        summary="Submit review",
        description="Creates the caller's review, or updates it if one exists. Requires a paid order "
        "(processing, shipped or delivered) containing the product.",
        request=ReviewSubmitSerializer,
        responses={200: ResultSchema, 201: ResultSchema, 400: ResultSchema, 401: ResultSchema, 403: ResultSchema},
        examples=[
            OpenApiExample(
                "Not purchased",
                value={"success": False, "message": "You must purchase this product before reviewing it"},
                response_only=True,
                status_codes=["403"],
            )
        ],
    )
    def post(self, request, product_id: int):
        serializer = ReviewSubmitSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)

        outcome = {}

        def _submit():
            review, created = submit_review(user=request.user, product_id=product_id, **serializer.validated_data)
            outcome["created"] = created
            return review

        result = run_action(
            _submit,
            success_message="Review submitted successfully",
            failure_message="Failed to submit review. Please try again.",
            data=lambda review: ReviewSerializer(review).data,
        )
        if result.success and not outcome["created"]:
            result.message = "Review updated successfully"
            return result_response(result, request=request)
        return result_response(result, request=request, success_status=status.HTTP_201_CREATED)
