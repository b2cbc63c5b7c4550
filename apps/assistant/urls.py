"""
Draft assistant URL configuration.
"""

from django.urls import path

from . import views

app_name = 'assistant'

urlpatterns = [
    path('summarize/', views.SummarizeView.as_view(), name='summarize'),
    path('tags/', views.TagsView.as_view(), name='tags'),
    path('seo/', views.SEOView.as_view(), name='seo'),
    path('translate/', views.TranslateView.as_view(), name='translate'),
    path('complete/', views.CompleteView.as_view(), name='complete'),
]
