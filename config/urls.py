"""
URL configuration for the newsroom backend.
"""

from django.contrib import admin
from django.urls import path, include

from apps.core.urls import auth_urlpatterns

urlpatterns = [
    path('admin/', admin.site.urls),
    # Auth endpoints
    path('api/auth/', include((auth_urlpatterns, 'auth'))),
    # Editorial workflow
    path('api/articles/', include('apps.articles.urls')),
    path('api/categories/', include('apps.categories.urls')),
    # AI draft assistant
    path('api/ai/', include('apps.assistant.urls')),
    # Health endpoints
    path('', include('apps.core.urls')),
]

# Customize admin site
admin.site.site_header = "Lokswami Newsroom Administration"
admin.site.site_title = "Lokswami Admin Portal"
admin.site.index_title = "Editorial administration"
