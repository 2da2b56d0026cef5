"""API views for posts and categories."""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.models import Role
from accounts.permissions import (
    IsAdminRole,
    IsAuthorOrReadOnly,
    IsEditorOrAdmin,
    IsEditorOrReadOnly,
)
from accounts.roles import has_role
from core.services.bulk import BulkPublicationService
from core.views import NewsroomBaseAPIView, envelope

from .models import Post
from .serializers import (
    BulkIdsSerializer,
    BulkStatusSerializer,
    CategorySerializer,
    CategoryWriteSerializer,
    PostListSerializer,
    PostSerializer,
    PostWriteSerializer,
)
from .services import CategoryService, PostService


# =============================================================================
# Post Views
# =============================================================================


class PostListCreateView(NewsroomBaseAPIView):
    """
    GET  /api/v1/posts/  - published posts (editors may filter drafts)
    POST /api/v1/posts/  - create a post (author+)
    """

    permission_classes = [IsAuthorOrReadOnly]

    @extend_schema(
        summary="List posts",
        parameters=[
            OpenApiParameter(
                name="status",
                type=str,
                description="'published' or 'draft' (editors); 'draft' or 'mine' (authors)",
            ),
            OpenApiParameter(name="category", type=str, description="Category id or slug"),
            OpenApiParameter(name="featured", type=str, description="'true' or 'false'"),
            OpenApiParameter(name="search", type=str, description="Title/body/excerpt search"),
            OpenApiParameter(name="page", type=int),
            OpenApiParameter(name="limit", type=int, description="Page size (max 50)"),
        ],
        responses={200: PostListSerializer(many=True)},
        tags=["Posts"],
    )
    def get(self, request: Request) -> Response:
        queryset = PostService(user=request.user).list(request.query_params)
        return self.paginate(queryset, PostListSerializer)

    @extend_schema(
        summary="Create post",
        description=(
            "Create a post. Slug and reading time are derived. A publish "
            "request from an author is saved as a draft."
        ),
        request=PostWriteSerializer,
        responses={201: PostSerializer},
        tags=["Posts"],
    )
    def post(self, request: Request) -> Response:
        serializer = PostWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        post = PostService(user=request.user).create(serializer.validated_data)

        message = "Post created"
        if serializer.validated_data.get("is_published") and not post.is_published:
            message = "Post saved as draft pending editorial review"

        return envelope(
            PostSerializer(post).data,
            message=message,
            status_code=status.HTTP_201_CREATED,
        )


class PostDetailView(NewsroomBaseAPIView):
    """
    GET         /api/v1/posts/<id>/  - read a post
    PATCH / PUT /api/v1/posts/<id>/  - update (owner author, editor, admin)
    DELETE      /api/v1/posts/<id>/  - delete (owner author, editor, admin)
    """

    permission_classes = [IsAuthorOrReadOnly]

    @extend_schema(summary="Get post", responses={200: PostSerializer}, tags=["Posts"])
    def get(self, request: Request, post_id: int) -> Response:
        post = PostService(user=request.user).get(post_id)
        return envelope(PostSerializer(post).data)

    @extend_schema(
        summary="Update post",
        request=PostWriteSerializer,
        responses={200: PostSerializer},
        tags=["Posts"],
    )
    def patch(self, request: Request, post_id: int) -> Response:
        return self._update(request, post_id, partial=True)

    @extend_schema(
        summary="Replace post",
        request=PostWriteSerializer,
        responses={200: PostSerializer},
        tags=["Posts"],
    )
    def put(self, request: Request, post_id: int) -> Response:
        return self._update(request, post_id, partial=False)

    def _update(self, request: Request, post_id: int, partial: bool) -> Response:
        serializer = PostWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        post = PostService(user=request.user).update(post_id, serializer.validated_data)
        return envelope(PostSerializer(post).data, message="Post updated")

    @extend_schema(summary="Delete post", responses={200: dict}, tags=["Posts"])
    def delete(self, request: Request, post_id: int) -> Response:
        PostService(user=request.user).delete(post_id)
        return envelope(message="Post deleted")


class PostPublicView(NewsroomBaseAPIView):
    """
    GET /api/v1/posts/<id>/<slug>/

    Public read of a published post; counts a view. The id is authoritative,
    the slug is cosmetic.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Read published post",
        description="Increments the post's view counter atomically.",
        responses={200: PostSerializer},
        tags=["Posts"],
    )
    def get(self, request: Request, post_id: int, slug: str) -> Response:
        post = PostService().record_view(post_id)
        return envelope(PostSerializer(post).data)


class PostFeaturedView(NewsroomBaseAPIView):
    """PATCH /api/v1/posts/<id>/featured/ - toggle featured flag (editor+)."""

    permission_classes = [IsEditorOrAdmin]

    @extend_schema(
        summary="Toggle featured",
        request=None,
        responses={200: PostSerializer},
        tags=["Posts"],
    )
    def patch(self, request: Request, post_id: int) -> Response:
        post = PostService(user=request.user).toggle_featured(post_id)
        message = "Post featured" if post.is_featured else "Post unfeatured"
        return envelope(PostSerializer(post).data, message=message)


class PostBulkStatusView(NewsroomBaseAPIView):
    """PATCH /api/v1/posts/bulk/status/ - publish or unpublish many posts (editor+)."""

    permission_classes = [IsEditorOrAdmin]

    @extend_schema(
        summary="Bulk publish/unpublish",
        description=(
            "Updates every listed post in one statement, then refreshes the "
            "mirrors. At most NEWSROOM_BULK_MAX_IDS ids per request."
        ),
        request=BulkStatusSerializer,
        responses={200: dict},
        tags=["Posts"],
    )
    def patch(self, request: Request) -> Response:
        payload = self.payload(request)
        result = BulkPublicationService(Post).set_status(
            ids=payload.get("ids"), status=payload.get("status")
        )
        return envelope(
            {"affected_rows": result.affected_rows, "status": result.status},
            message=f"{result.affected_rows} post(s) updated",
        )


class PostBulkDeleteView(NewsroomBaseAPIView):
    """DELETE /api/v1/posts/bulk/ - delete many posts (editor+)."""

    permission_classes = [IsEditorOrAdmin]

    @extend_schema(
        summary="Bulk delete posts",
        request=BulkIdsSerializer,
        responses={200: dict},
        tags=["Posts"],
    )
    def delete(self, request: Request) -> Response:
        result = BulkPublicationService(Post).delete(ids=self.payload(request).get("ids"))
        return envelope(
            {"deleted": result.deleted},
            message=f"{result.deleted} post(s) deleted",
        )


# =============================================================================
# Category Views
# =============================================================================


class CategoryListCreateView(NewsroomBaseAPIView):
    """
    GET  /api/v1/categories/  - active categories (editors: ?all=true)
    POST /api/v1/categories/  - create (editor+)
    """

    permission_classes = [IsEditorOrReadOnly]

    @extend_schema(
        summary="List categories",
        parameters=[
            OpenApiParameter(
                name="all", type=str, description="'true' to include inactive (editors)"
            )
        ],
        responses={200: CategorySerializer(many=True)},
        tags=["Categories"],
    )
    def get(self, request: Request) -> Response:
        include_inactive = (
            request.query_params.get("all") == "true"
            and has_role(request.user, Role.EDITOR)
        )
        categories = CategoryService().list(include_inactive=include_inactive)
        return envelope(CategorySerializer(categories, many=True).data)

    @extend_schema(
        summary="Create category",
        request=CategoryWriteSerializer,
        responses={201: CategorySerializer},
        tags=["Categories"],
    )
    def post(self, request: Request) -> Response:
        serializer = CategoryWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = CategoryService(user=request.user).create(serializer.validated_data)
        return envelope(
            CategorySerializer(category).data,
            message="Category created",
            status_code=status.HTTP_201_CREATED,
        )


class CategoryDetailView(NewsroomBaseAPIView):
    """
    GET    /api/v1/categories/<id>/
    PATCH  /api/v1/categories/<id>/  (editor+)
    DELETE /api/v1/categories/<id>/  (admin; 409 while posts remain)
    """

    permission_classes = [IsEditorOrReadOnly]

    @extend_schema(summary="Get category", responses={200: CategorySerializer}, tags=["Categories"])
    def get(self, request: Request, category_id: int) -> Response:
        category = CategoryService().get(category_id)
        return envelope(CategorySerializer(category).data)

    @extend_schema(
        summary="Update category",
        request=CategoryWriteSerializer,
        responses={200: CategorySerializer},
        tags=["Categories"],
    )
    def patch(self, request: Request, category_id: int) -> Response:
        serializer = CategoryWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        category = CategoryService(user=request.user).update(
            category_id, serializer.validated_data
        )
        return envelope(CategorySerializer(category).data, message="Category updated")

    @extend_schema(summary="Delete category", responses={200: dict}, tags=["Categories"])
    def delete(self, request: Request, category_id: int) -> Response:
        if not has_role(request.user, Role.ADMIN):
            self.permission_denied(request, message=IsAdminRole.message)

        CategoryService(user=request.user).delete(category_id)
        return envelope(message="Category deleted")


class CategoryBulkDeleteView(NewsroomBaseAPIView):
    """DELETE /api/v1/categories/bulk/ - delete many categories (admin)."""

    permission_classes = [IsAdminRole]

    @extend_schema(
        summary="Bulk delete categories",
        description="All-or-nothing: rejected with 409 if any category still has posts.",
        request=BulkIdsSerializer,
        responses={200: dict},
        tags=["Categories"],
    )
    def delete(self, request: Request) -> Response:
        deleted = CategoryService(user=request.user).bulk_delete(
            self.payload(request).get("ids")
        )
        return envelope({"deleted": deleted}, message=f"{deleted} category(ies) deleted")
