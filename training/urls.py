from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import TrainingPlanViewSet

router = DefaultRouter()
router.register(r'training-plans', TrainingPlanViewSet, basename='training-plan')

urlpatterns = [
    path('', include(router.urls)),
]
