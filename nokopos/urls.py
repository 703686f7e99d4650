from django.contrib import admin
from django.urls import include, path, re_path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from authentication import views as auth_views
from nokopos.exceptions import api_not_found

# Setup Swagger schema view
schema_view = get_schema_view(
    openapi.Info(
        title='NOKO POS API',
        default_version='v1',
        description="Point-of-sale API: menu catalog, orders and sales analytics",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),

    # =============== API DOCUMENTATION ===============
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    path('api/health/', auth_views.health_check, name='health_check'),
    path('api/auth/', include('authentication.urls')),
    path('api/', include('inventory.urls')),
    path('api/orders/', include('orders.urls')),

    # Anything else under /api/ is a JSON 404
    re_path(r'^api/.*$', api_not_found),
]
