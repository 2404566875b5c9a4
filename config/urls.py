from django.conf import settings
from django.contrib import admin
from django.urls import path, include, re_path
from django.views.static import serve

admin.site.site_header = "Inventory Admin Panel"
admin.site.site_title = "Inventory Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('users.urls')),
    path('api/', include('inventory.urls')),
    path('api/logs/', include('logs.urls')),
]

if settings.DEBUG:
    urlpatterns += [
        re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    ]
