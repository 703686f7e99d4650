from django.urls import path

from . import views

app_name = 'inventory'

urlpatterns = [
    # Category URLs
    path('categories/', views.CategoryListCreateView.as_view(), name='category-list-create'),
    path('categories/<uuid:pk>/', views.CategoryDetailView.as_view(), name='category-detail'),

    # Menu URLs
    path('menu/', views.MenuListCreateView.as_view(), name='menu-list-create'),
    path('menu/<uuid:pk>/', views.MenuDetailView.as_view(), name='menu-detail'),
]
