from rest_framework_simplejwt.tokens import RefreshToken


def generate_tokens_for_user(user):
    refresh = RefreshToken.for_user(user)
    refresh['user_type'] = user.user_type
    return str(refresh.access_token), str(refresh)
