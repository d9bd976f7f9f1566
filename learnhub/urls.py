from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # session login/logout for the browsable API
    path('api-auth/', include('rest_framework.urls')),

    # course progression + final exam API
    path('api/courses/', include('courses.urls')),
]
