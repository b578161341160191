from rest_framework import generics
from rest_framework.permissions import IsAuthenticated

from .serializers import UserProfileSerializer


class UserProfileMeView(generics.RetrieveUpdateAPIView):
    """
    The caller's own profile, including the role the client uses to decide
    which training plan actions to offer.
    """
    serializer_class = UserProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user
