from rest_framework import serializers

from .models import CustomUser


class UserProfileSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = CustomUser
        fields = ('id', 'email', 'first_name', 'last_name', 'full_name', 'role',
                  'supervisor_sport_types', 'profile_picture')
        read_only_fields = ('email', 'role', 'supervisor_sport_types')
