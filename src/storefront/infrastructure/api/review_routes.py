"""Review endpoints.  Every write refreshes the product's rating."""

from fastapi import APIRouter, Depends

from storefront.application.add_review import AddReviewHandler
from storefront.application.delete_review import DeleteReviewHandler
from storefront.application.list_reviews import ListReviewsHandler
from storefront.application.update_review import UpdateReviewHandler
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.infrastructure.api.dependencies import (
    Caller,
    current_caller,
    get_product_repository,
    get_review_repository,
)
from storefront.infrastructure.api.schemas import ReviewRequest

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/product/{product_id}")
def product_reviews(
    product_id: str,
    review_repo: ReviewRepository = Depends(get_review_repository),
):
    return ListReviewsHandler(review_repo).handle(product_id)


@router.post("/product/{product_id}", status_code=201)
def add_review(
    product_id: str,
    req: ReviewRequest,
    caller: Caller = Depends(current_caller),
    review_repo: ReviewRepository = Depends(get_review_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    return AddReviewHandler(review_repo, product_repo).handle(
        user_id=caller.user_id,
        product_id=product_id,
        rating=req.rating,
        comment=req.comment,
    )


@router.put("/{review_id}")
def update_review(
    review_id: str,
    req: ReviewRequest,
    caller: Caller = Depends(current_caller),
    review_repo: ReviewRepository = Depends(get_review_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    return UpdateReviewHandler(review_repo, product_repo).handle(
        review_id=review_id,
        user_id=caller.user_id,
        rating=req.rating,
        comment=req.comment,
    )


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    caller: Caller = Depends(current_caller),
    review_repo: ReviewRepository = Depends(get_review_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    DeleteReviewHandler(review_repo, product_repo).handle(
        review_id=review_id, user_id=caller.user_id, is_admin=caller.is_admin
    )
    return {"message": "Review deleted"}
