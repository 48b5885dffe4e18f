from app.schemas.schemas import Pagination


def total_pages(total: int, per_page: int) -> int:
    return (total // per_page) + (1 if total % per_page else 0)


def paginate_response(total: int, page: int, per_page: int) -> dict:
    pages = total_pages(total, per_page)
    return Pagination(
        current_page=page,
        total_pages=pages,
        total_items=total,
        items_per_page=per_page,
        has_next_page=page < pages,
        has_prev_page=page > 1,
    ).model_dump(by_alias=True)
