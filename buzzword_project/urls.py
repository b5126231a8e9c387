from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # App de Bingo
    path('', include('buzzword_app.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

# Custom admin site headers
admin.site.site_header = "Buzzword Bingo"
admin.site.site_title = "Buzzword Bingo admin"
admin.site.index_title = "Sessions and users"
