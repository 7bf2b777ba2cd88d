from marshmallow import Schema, fields, EXCLUDE


class ChirpCreateSchema(Schema):
    class Meta:
        # the owner comes from the access token; a client-supplied user_id is ignored
        unknown = EXCLUDE

    body = fields.String(required=True)


class ChirpOutSchema(Schema):
    id = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    body = fields.String()
    user_id = fields.String()
