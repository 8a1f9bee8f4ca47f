# models/property_image.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class PropertyImage(Base):
     """
     Image attached to a property listing.
     The file itself lives in Azure Blob Storage; only its URL is stored.
     """
     __tablename__ = "property_images"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
     url = Column(String(500), nullable=False)
     is_cover = Column(Boolean, default=False, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     property = relationship("Property", back_populates="images")

     def __repr__(self):
          return f"<PropertyImage(id={self.id}, property_id={self.property_id}, is_cover={self.is_cover})>"
