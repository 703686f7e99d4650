from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers

from nokopos.exceptions import InvalidCredentials

User = get_user_model()


class StaffSerializer(serializers.ModelSerializer):
    lastLogin = serializers.DateTimeField(source='last_login', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'lastLogin']
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get('request'),
            username=attrs['username'],
            password=attrs['password'],
        )
        # authenticate() already refuses inactive accounts
        if user is None:
            raise InvalidCredentials()
        attrs['user'] = user
        return attrs


class TokenVerifySerializer(serializers.Serializer):
    token = serializers.CharField()
