from django.urls import path

from .views import UserProfileMeView

urlpatterns = [
    path('me/', UserProfileMeView.as_view(), name='user_profile_me'),
]
