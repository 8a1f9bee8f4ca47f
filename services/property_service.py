# services/property_service.py
"""
Property Service - landlord listings.

Only landlords list properties, and only the owner edits a listing or
changes its status.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Property, PropertyImage, PropertyStatus, RentingType, User, UserRole
from schemas.property import PropertyCreate, PropertyUpdate
from services.context import CurrentUser
from services.exceptions import NotFoundError, UnauthorizedError
from utils.blob_storage import PROPERTY_IMAGES_CONTAINER, delete_from_blob, upload_to_blob

logger = logging.getLogger(__name__)


class PropertyService:
     """Service class for property listings."""

     @staticmethod
     def get(db: Session, property_id: int) -> Property:
          prop = db.query(Property).filter(Property.id == property_id).first()
          if prop is None:
               raise NotFoundError.for_entity("Property", property_id)
          return prop

     @staticmethod
     def _get_owned(db: Session, property_id: int, current_user: CurrentUser) -> Property:
          prop = PropertyService.get(db, property_id)
          if prop.owner_id != current_user.id:
               raise UnauthorizedError("Only the property owner can modify this property")
          return prop

     @staticmethod
     def create(db: Session, data: PropertyCreate, current_user: CurrentUser) -> Property:
          """
          List a new property owned by the caller.

          Raises:
               UnauthorizedError: If the caller isn't a landlord
          """
          owner = db.query(User).filter(User.id == current_user.id).first()
          if owner is None or owner.role != UserRole.LANDLORD:
               raise UnauthorizedError("Only landlords can list properties")

          prop = Property(
               owner_id=owner.id,
               name=data.name,
               description=data.description,
               price=data.price,
               bedrooms=data.bedrooms,
               renting_type=data.renting_type,
               status=data.status,
          )
          db.add(prop)
          db.flush()
          logger.info("Landlord %s listed property %s", owner.id, prop.id)
          return prop

     @staticmethod
     def update(db: Session, property_id: int, data: PropertyUpdate, current_user: CurrentUser) -> Property:
          prop = PropertyService._get_owned(db, property_id, current_user)
          for field, value in data.model_dump(exclude_unset=True).items():
               if value is not None:
                    setattr(prop, field, value)
          db.flush()
          return prop

     @staticmethod
     def update_status(
          db: Session,
          property_id: int,
          status: PropertyStatus,
          current_user: CurrentUser
     ) -> Property:
          prop = PropertyService._get_owned(db, property_id, current_user)
          prop.status = status
          db.flush()
          logger.info("Property %s status set to %s", property_id, status.value)
          return prop

     @staticmethod
     def list_properties(
          db: Session,
          status: Optional[PropertyStatus] = None,
          renting_type: Optional[RentingType] = None,
          owner_id: Optional[int] = None,
          min_price: Optional[Decimal] = None,
          max_price: Optional[Decimal] = None,
          page: int = 1,
          page_size: int = 10
     ) -> Tuple[List[Property], int]:
          query = db.query(Property)
          if status is not None:
               query = query.filter(Property.status == status)
          if renting_type is not None:
               query = query.filter(Property.renting_type == renting_type)
          if owner_id is not None:
               query = query.filter(Property.owner_id == owner_id)
          if min_price is not None:
               query = query.filter(Property.price >= min_price)
          if max_price is not None:
               query = query.filter(Property.price <= max_price)

          total = query.count()
          offset = (page - 1) * page_size
          items = query.order_by(Property.id.desc()).offset(offset).limit(page_size).all()
          return items, total

     @staticmethod
     def add_image(
          db: Session,
          property_id: int,
          upload,
          current_user: CurrentUser,
          is_cover: bool = False
     ) -> PropertyImage:
          """
          Store an uploaded file in blob storage and attach it to the listing.

          A new cover image unsets the previous one. If the row cannot be
          saved, the uploaded blob is deleted again.
          """
          prop = PropertyService._get_owned(db, property_id, current_user)
          url = upload_to_blob(upload, PROPERTY_IMAGES_CONTAINER, prop.id)

          if is_cover:
               for image in prop.images:
                    image.is_cover = False
          image = PropertyImage(url=url, is_cover=is_cover)
          prop.images.append(image)
          try:
               db.flush()
          except SQLAlchemyError:
               logger.warning("Could not save image for property %s; deleting blob %s", property_id, url)
               delete_from_blob(url)
               raise
          logger.info("Added image %s to property %s", image.id, property_id)
          return image

     @staticmethod
     def remove_image(db: Session, property_id: int, image_id: int, current_user: CurrentUser) -> None:
          prop = PropertyService._get_owned(db, property_id, current_user)
          image = next((image for image in prop.images if image.id == image_id), None)
          if image is None:
               raise NotFoundError.for_entity("Image", image_id)
          prop.images.remove(image)
          db.flush()
          delete_from_blob(image.url)
          logger.info("Removed image %s from property %s", image_id, property_id)
