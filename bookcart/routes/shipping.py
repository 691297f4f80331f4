from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from bookcart.database import get_session
from bookcart.models.shipping_rate import REST_OF_WORLD, ShippingRate

router = APIRouter()


def find_rate(session: Session, country_code: str):
    return session.exec(
        select(ShippingRate).where(
            ShippingRate.country_code == country_code,
            ShippingRate.is_active == True,  # noqa: E712
        )
    ).first()


# Shipping rate lookup by country
@router.get("/{country_code}")
def get_shipping_rate(country_code: str, session: Session = Depends(get_session)):

    # country rate, then REST_OF_WORLD, then whichever rate is flagged default
    rate = find_rate(session, country_code.upper()) or find_rate(session, REST_OF_WORLD)

    if not rate:
        rate = session.exec(
            select(ShippingRate).where(
                ShippingRate.is_default == True,  # noqa: E712
                ShippingRate.is_active == True,  # noqa: E712
            )
        ).first()

    if not rate:
        raise HTTPException(status_code=404, detail="No shipping rate found")

    return rate
