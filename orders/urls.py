from django.urls import path

from . import views

app_name = 'orders'

urlpatterns = [
    # Orders
    path('', views.OrderListCreateView.as_view(), name='order-list-create'),
    path('<uuid:pk>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('<uuid:pk>/status/', views.OrderStatusView.as_view(), name='order-status'),

    # Analytics
    path('analytics/daily/', views.DailyAnalyticsView.as_view(), name='analytics-daily'),
    path('analytics/daily/export/', views.DailyAnalyticsExportView.as_view(), name='analytics-daily-export'),
]
