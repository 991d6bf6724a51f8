"""
Base Service Classes
====================

Base classes dan utilities untuk semua services
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
from datetime import datetime
from functools import wraps
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from .exceptions import ValidationError, NotFoundError, ConflictError

logger = logging.getLogger(__name__)

def transactional(func):
    """Decorator untuk automatic transaction management"""
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            result = await func(self, *args, **kwargs)
            if getattr(self, 'db_session', None) is not None:
                await self.db_session.commit()
            return result
        except Exception as e:
            if getattr(self, 'db_session', None) is not None:
                await self.db_session.rollback()
            logger.error(f"Transaction failed in {func.__name__}: {str(e)}")
            raise
    return wrapper

def audit_log(action: str, entity_type: str = None):
    """Decorator untuk audit logging. entity_type default ke nama model service."""
    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            request_id = str(uuid.uuid4())
            resolved_type = entity_type or getattr(getattr(self, 'model_class', None), '__name__', 'Entity')

            old_values = None
            entity_id = None

            # Untuk UPDATE, simpan state lama sebelum eksekusi
            if action == 'UPDATE' and args and hasattr(self, 'response_schema'):
                entity_id = args[0]
                try:
                    old_entity = await self._get_or_404(self.model_class, entity_id)
                    old_values = self.response_schema.model_validate(old_entity).model_dump(mode='json')
                except NotFoundError:
                    # akan di-raise lagi oleh fungsi utama
                    pass

            try:
                result = await func(self, *args, **kwargs)
            except Exception as e:
                self.logger.warning(f"{action} {resolved_type} failed: {e}")
                raise

            if getattr(self, 'audit_service', None):
                final_entity_id = entity_id
                new_values = None

                if hasattr(result, 'id'):
                    final_entity_id = result.id
                elif isinstance(result, dict) and 'id' in result:
                    final_entity_id = result['id']

                if action == 'UPDATE' and isinstance(result, dict) and old_values:
                    new_json = self.response_schema.model_validate(result).model_dump(mode='json')
                    # simpan hanya field yang berubah
                    new_values = {k: v for k, v in new_json.items() if k in old_values and v != old_values[k]}
                    old_values = {k: old_values[k] for k in new_values}

                await self.audit_service.log_action(
                    entity_type=resolved_type,
                    entity_id=final_entity_id,
                    action=action,
                    username=self.current_user,
                    old_values=old_values,
                    new_values=new_values,
                    request_id=request_id,
                )

            return result
        return wrapper
    return decorator

class BaseService(ABC):
    """Base service class dengan common functionality"""

    def __init__(self, db_session: AsyncSession, current_user: str = None,
                 audit_service=None):
        self.db_session = db_session
        self.current_user = current_user
        self.audit_service = audit_service
        self.logger = logging.getLogger(self.__class__.__name__)

    async def _get_or_404(self, model_class, entity_id: int):
        """Get entity by ID or raise 404 error"""
        result = await self.db_session.execute(select(model_class).filter(model_class.id == entity_id))
        entity = result.scalars().first()
        if not entity:
            raise NotFoundError(model_class.__name__, entity_id)
        return entity

    async def _validate_unique_field(self, model_class, field_name: str, field_value: Any,
                                     exclude_id: int = None, error_message: str = None):
        """Validate that field value is unique"""
        query = select(model_class).filter(getattr(model_class, field_name) == field_value)
        if exclude_id:
            query = query.filter(model_class.id != exclude_id)

        result = await self.db_session.execute(query)
        if result.scalars().first():
            message = error_message or f"{field_name} '{field_value}' already exists"
            raise ConflictError(message, model_class.__name__, field=field_name)

    async def _paginate_query(self, query, page: int = 1, per_page: int = 20,
                              max_per_page: int = 100):
        """Paginate query results"""
        per_page = min(per_page, max_per_page)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db_session.execute(count_query)).scalar()

        pages = (total + per_page - 1) // per_page if total > 0 else 1

        offset = (page - 1) * per_page
        items_result = await self.db_session.execute(query.offset(offset).limit(per_page))
        items = items_result.scalars().all()

        return {
            'items': items,
            'pagination': {
                'page': page,
                'per_page': per_page,
                'total': total,
                'pages': pages,
                'has_prev': page > 1,
                'has_next': page < pages
            }
        }

    def _apply_search(self, query, model_class, search_term: str, search_fields: List[str]):
        """Apply text search to query"""
        if not search_term or not search_fields:
            return query

        conditions = [
            getattr(model_class, field).ilike(f'%{search_term}%')
            for field in search_fields if hasattr(model_class, field)
        ]
        if conditions:
            query = query.filter(or_(*conditions))
        return query

    def _apply_sorting(self, query, model_class, sort_by: str = None,
                       sort_order: str = 'asc', default_sort: str = 'id'):
        """Apply sorting to query"""
        sort_field = sort_by or default_sort

        if hasattr(model_class, sort_field):
            field_attr = getattr(model_class, sort_field)
            if sort_order.lower() == 'desc':
                query = query.order_by(field_attr.desc())
            else:
                query = query.order_by(field_attr.asc())

        return query

class CRUDService(BaseService):
    """Service class dengan CRUD operations standard"""

    unique_fields: tuple = ('code',)
    search_fields: tuple = ('code', 'name')

    @property
    @abstractmethod
    def model_class(self):
        """Model class yang digunakan service ini"""
        pass

    @property
    @abstractmethod
    def create_schema(self):
        """Schema untuk create operations"""
        pass

    @property
    @abstractmethod
    def update_schema(self):
        """Schema untuk update operations"""
        pass

    @property
    @abstractmethod
    def response_schema(self):
        """Schema untuk response"""
        pass

    def _serialize(self, entity) -> Dict[str, Any]:
        return self.response_schema.model_validate(entity).model_dump()

    @transactional
    @audit_log('CREATE')
    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create new entity"""
        validated_data = self.create_schema.model_validate(data).model_dump()

        for field in self.unique_fields:
            if field in validated_data:
                await self._validate_unique_field(self.model_class, field, validated_data[field])

        entity = self.model_class(**validated_data)
        self.db_session.add(entity)
        await self.db_session.flush()  # Get ID

        return self._serialize(entity)

    async def get_by_id(self, entity_id: int) -> Dict[str, Any]:
        """Get entity by ID"""
        entity = await self._get_or_404(self.model_class, entity_id)
        return self._serialize(entity)

    async def list(self, page: int = 1, per_page: int = 20, search: str = None,
                   sort_by: str = None, sort_order: str = 'asc') -> Dict[str, Any]:
        """List entities with pagination and search"""
        query = select(self.model_class)
        query = self._apply_search(query, self.model_class, search, list(self.search_fields))
        query = self._apply_sorting(query, self.model_class, sort_by, sort_order, default_sort='code')

        result = await self._paginate_query(query, page, per_page)

        return {
            'items': [self._serialize(item) for item in result['items']],
            'pagination': result['pagination']
        }

    @transactional
    @audit_log('UPDATE')
    async def update(self, entity_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update entity"""
        entity = await self._get_or_404(self.model_class, entity_id)

        validated_data = self.update_schema.model_validate(data).model_dump(exclude_unset=True)

        for field in self.unique_fields:
            if validated_data.get(field) is not None:
                await self._validate_unique_field(self.model_class, field, validated_data[field],
                                                  exclude_id=entity_id)

        for key, value in validated_data.items():
            setattr(entity, key, value)
        entity.updated_at = datetime.utcnow()

        await self.db_session.flush()
        return self._serialize(entity)

    @transactional
    @audit_log('DELETE')
    async def delete(self, entity_id: int) -> Dict[str, Any]:
        """Delete entity; soft delete kalau model punya kolom status"""
        entity = await self._get_or_404(self.model_class, entity_id)
        deleted = {'id': entity.id}

        if hasattr(entity, 'status'):
            entity.status = 'INACTIVE'
        else:
            await self.db_session.delete(entity)

        return deleted
