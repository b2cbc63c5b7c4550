"""
Category API URLs.
"""

from django.urls import path, include
from config.routers import SafeDefaultRouter
from .views import CategoryViewSet

app_name = 'categories'

router = SafeDefaultRouter()
router.register(r'', CategoryViewSet, basename='category')

urlpatterns = [
    path('', include(router.urls)),
]
